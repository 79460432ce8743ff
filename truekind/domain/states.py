# truekind/domain/states.py
from truekind.domain.errors import InvalidRequest


class StateMachine:
    """Allowed status moves for one column. A write of the current status is a no-op."""

    def __init__(self, name: str, transitions: dict[str, set[str]], invalid_code: str, transition_code: str):
        self.name = name
        self.transitions = transitions
        self.invalid_code = invalid_code
        self.transition_code = transition_code

    @property
    def states(self) -> set[str]:
        return set(self.transitions)

    def validate(self, value: str) -> str:
        if value not in self.transitions:
            allowed = ", ".join(sorted(self.transitions))
            raise InvalidRequest(f"{self.name} must be one of: {allowed}", self.invalid_code)
        return value

    def can_move(self, current: str, target: str) -> bool:
        return current == target or target in self.transitions.get(current, set())

    def move(self, current: str, target: str) -> str:
        self.validate(target)
        if not self.can_move(current, target):
            raise InvalidRequest(
                f"Cannot change {self.name} from '{current}' to '{target}'",
                self.transition_code,
            )
        return target


ORDER_STATUS = StateMachine(
    "status",
    {
        "pending": {"confirmed", "cancelled"},
        "confirmed": {"processing", "cancelled"},
        "processing": {"shipped", "cancelled"},
        "shipped": {"delivered"},
        "delivered": set(),
        "cancelled": set(),
    },
    invalid_code="INVALID_STATUS",
    transition_code="INVALID_STATUS_TRANSITION",
)

PAYMENT_STATUS = StateMachine(
    "paymentStatus",
    {
        "pending": {"paid", "failed"},
        "failed": {"pending", "paid"},
        "paid": {"refunded"},
        "refunded": set(),
    },
    invalid_code="INVALID_PAYMENT_STATUS",
    transition_code="INVALID_PAYMENT_STATUS_TRANSITION",
)

POST_STATUS = StateMachine(
    "status",
    {
        "draft": {"published", "scheduled"},
        "scheduled": {"published", "draft"},
        "published": set(),
    },
    invalid_code="INVALID_STATUS",
    transition_code="INVALID_STATUS_TRANSITION",
)

COMMENT_STATUS = StateMachine(
    "status",
    {
        "pending": {"approved", "rejected"},
        "approved": {"rejected"},
        "rejected": {"approved"},
    },
    invalid_code="INVALID_STATUS",
    transition_code="INVALID_STATUS_TRANSITION",
)

ANALYTICS_EVENTS = ("pageview", "share", "product_click", "scroll_50", "scroll_100")
USER_ROLES = ("admin", "editor", "user")
STAFF_ROLES = ("admin", "editor")
