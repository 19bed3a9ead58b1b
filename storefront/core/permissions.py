"""
permissions.py

권한(Role) → 허용 작업(Permission) 정책 테이블.

엔드포인트마다 역할 목록을 흩어 두지 않고,
모든 권한 검사는 이 테이블 하나만 참조한다.
새로운 관리 기능을 추가할 때는 Permission 을 하나 추가하고
POLICY 에 허용 역할을 등록하면 된다.

관련 파일:
- storefront.core.deps          : require_permission 의존성에서 사용

"""

from enum import Enum

from storefront.models.user import Role


class Permission(str, Enum):
    GENERATE_ACCESS_CODES = "generate_access_codes"
    LIST_ACCESS_CODES = "list_access_codes"
    MANAGE_PRODUCTS = "manage_products"
    MANAGE_CATEGORIES = "manage_categories"
    VIEW_AUDIT_LOGS = "view_audit_logs"
    INTERACT_WITH_PRODUCTS = "interact_with_products"


ADMIN_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
ALL_ROLES = frozenset(Role)

POLICY: dict[Permission, frozenset[Role]] = {
    Permission.GENERATE_ACCESS_CODES: ADMIN_ROLES,
    Permission.LIST_ACCESS_CODES: ADMIN_ROLES,
    Permission.MANAGE_PRODUCTS: ADMIN_ROLES,
    Permission.MANAGE_CATEGORIES: ADMIN_ROLES,
    Permission.VIEW_AUDIT_LOGS: ADMIN_ROLES,
    Permission.INTERACT_WITH_PRODUCTS: ALL_ROLES,
}


def is_allowed(role: Role, permission: Permission) -> bool:
    # 테이블에 없는 권한은 아무에게도 허용하지 않음
    return role in POLICY.get(permission, frozenset())
