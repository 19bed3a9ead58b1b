# Base.metadata에 모든 테이블을 등록하기 위한 import 모음
from storefront.models.user import User, Role  # noqa: F401
from storefront.models.access_code import AccessCode  # noqa: F401
from storefront.models.session import UserSession  # noqa: F401
from storefront.models.audit_log import AuditLog, AuditAction  # noqa: F401
from storefront.models.category import Category  # noqa: F401
from storefront.models.product import Product, ProductLike, ProductTag  # noqa: F401
from storefront.models.comment import Comment  # noqa: F401
