# truekind/services/blog_taxonomy_service.py
from truekind.data.models.blog import BlogCategoryModel, BlogTagModel
from truekind.domain.errors import Conflict, InvalidRequest, NotFound
from truekind.domain.schemas.blog import BlogCategoryOut, BlogTagOut
from truekind.repos.blog_repo import BlogCategoryRepo, BlogTagRepo
from truekind.services.base import CrudService, require_changes
from truekind.utils.logging import get_logger
from truekind.utils.text import slugify

logger = get_logger(__name__)


class _TaxonomyService(CrudService):
    """Blog categories and tags: named, slugged, counted by published posts."""

    model = None

    def list(self, page: dict):
        return [self._with_count(row, count) for row, count in self.repo.list_with_counts(**page)]

    def get_counted(self, obj_id: int):
        rows = self.repo.list_with_counts(filters=[self.model.id == obj_id], limit=1)
        if not rows:
            raise NotFound(*self.not_found)
        return self._with_count(*rows[0])

    def _with_count(self, row, count):
        return self.out_schema.model_validate(row).model_copy(update={"post_count": count or 0})

    def create(self, payload):
        data = payload.model_dump()
        data["slug"] = data.get("slug") or slugify(data["name"])
        if not data["slug"]:
            raise InvalidRequest("A slug could not be derived from the name", "INVALID_SLUG")
        obj = self.repo.add(self.model(**data))
        logger.info(f"{self.deleted_name} {obj.id} created ({obj.slug})")
        return self.out_schema.model_validate(obj)

    def update(self, obj_id: int, payload):
        obj = self.get(obj_id)
        self.repo.update(obj, require_changes(payload.changes()))
        return self.get_counted(obj_id)


class BlogCategoryService(_TaxonomyService):
    repo_class = BlogCategoryRepo
    model = BlogCategoryModel
    out_schema = BlogCategoryOut
    not_found = ("Blog category not found", "CATEGORY_NOT_FOUND")
    deleted_name = "Blog category"

    def check_delete(self, category, user=None):
        if self.repo.in_use(category.id):
            raise Conflict("Category has posts assigned", "CATEGORY_IN_USE")


class BlogTagService(_TaxonomyService):
    repo_class = BlogTagRepo
    model = BlogTagModel
    out_schema = BlogTagOut
    not_found = ("Tag not found", "TAG_NOT_FOUND")
    deleted_name = "Tag"

    def check_delete(self, tag, user=None):
        if self.repo.in_use(tag.id):
            raise Conflict("Tag is attached to posts", "TAG_IN_USE")
