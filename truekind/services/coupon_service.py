# truekind/services/coupon_service.py
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from truekind.data.models.commerce import CouponModel
from truekind.domain.errors import InvalidRequest, NotFound
from truekind.domain.schemas.commerce import (
    CouponIn,
    CouponOut,
    CouponQuote,
    CouponUpdate,
    coupon_terms_error,
)
from truekind.repos.commerce_repo import CouponRepo
from truekind.services.base import CrudService, build_filters, require_changes
from truekind.utils.clock import as_utc, utcnow
from truekind.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def discount_for(coupon: CouponModel, subtotal: Decimal) -> Decimal:
    """Percentage coupons are capped by max_discount_amount, fixed ones by the subtotal."""
    if coupon.discount_type == "percentage":
        discount = subtotal * Decimal(coupon.discount_value) / 100
        if coupon.max_discount_amount is not None:
            discount = min(discount, Decimal(coupon.max_discount_amount))
    else:
        discount = Decimal(coupon.discount_value)
    return money(min(discount, subtotal))


class CouponService(CrudService):
    repo_class = CouponRepo
    out_schema = CouponOut
    not_found = ("Coupon not found", "COUPON_NOT_FOUND")
    deleted_name = "Coupon"

    def list(self, page: dict, is_active: bool | None = None, discount_type: str | None = None,
             code: str | None = None):
        filters = build_filters(
            (CouponModel.is_active, is_active),
            (CouponModel.discount_type, discount_type),
            (CouponModel.code, code.upper() if code else None),
        )
        return self.repo.list(filters=filters, **page)

    def create(self, payload: CouponIn) -> CouponModel:
        coupon = self.repo.add(CouponModel(**payload.model_dump()))
        logger.info(f"Coupon {coupon.code} created")
        return coupon

    def update(self, coupon_id: int, payload: CouponUpdate) -> CouponModel:
        coupon = self.get(coupon_id)
        changes = require_changes(payload.changes())

        merged = {
            key: changes.get(key, getattr(coupon, key))
            for key in ("discount_type", "discount_value", "valid_from", "valid_until")
        }
        error = coupon_terms_error(
            merged["discount_type"],
            Decimal(merged["discount_value"]),
            as_utc(merged["valid_from"]),
            as_utc(merged["valid_until"]),
        )
        if error:
            code, message = error
            raise InvalidRequest(message, code)
        return self.repo.update(coupon, changes)

    # redemption rules

    def usable_coupon(self, code: str, subtotal: Decimal, now: datetime | None = None) -> CouponModel:
        """The coupon for `code` if it can be applied to `subtotal` right now."""
        now = now or utcnow()
        coupon = self.repo.get_by_code(code)
        if not coupon:
            raise NotFound("Coupon not found", "COUPON_NOT_FOUND")
        if not coupon.is_active:
            raise InvalidRequest("Coupon is not active", "COUPON_INACTIVE")
        if now < as_utc(coupon.valid_from):
            raise InvalidRequest("Coupon is not valid yet", "COUPON_NOT_YET_VALID")
        if now > as_utc(coupon.valid_until):
            raise InvalidRequest("Coupon has expired", "COUPON_EXPIRED")
        if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
            raise InvalidRequest("Coupon usage limit reached", "COUPON_USAGE_LIMIT_REACHED")
        if coupon.min_purchase_amount is not None and subtotal < Decimal(coupon.min_purchase_amount):
            raise InvalidRequest(
                f"Minimum purchase of {money(coupon.min_purchase_amount)} required",
                "MIN_PURCHASE_NOT_MET",
            )
        return coupon

    def quote(self, code: str, subtotal: Decimal) -> CouponQuote:
        coupon = self.usable_coupon(code, subtotal)
        discount = discount_for(coupon, subtotal)
        return CouponQuote(
            coupon=CouponOut.model_validate(coupon),
            discount_amount=discount,
            total=money(subtotal - discount),
        )
