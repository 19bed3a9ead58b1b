from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.deps import get_db, require_permission
from storefront.core.permissions import Permission
from storefront.models.user import User
from storefront.services.audit_log import list_audit_logs

router = APIRouter(prefix="/api/admin", tags=["admin"])


# 관리자 활동 로그 조회 엔드포인트 (최신순)
@router.get("/audit-logs")
def audit_logs(
    limit: int = Query(50),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission(Permission.VIEW_AUDIT_LOGS)),
):
    logs, limit = list_audit_logs(db, limit=limit)
    return {
        "success": True,
        "data": [
            {
                "id": str(log.id),
                "adminId": str(log.admin_id),
                "action": log.action,
                "resourceType": log.resource_type,
                "resourceId": log.resource_id,
                "oldValue": log.old_value,
                "newValue": log.new_value,
                "createdAt": log.created_at.isoformat(),
            }
            for log in logs
        ],
        "meta": {
            "limit": limit,
            "count": len(logs),
        },
    }
