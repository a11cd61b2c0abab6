"""Superadmin router for tenant and user management."""
from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coupongen.database import get_db
from coupongen.models.user import User, UserRole
from coupongen.routers.auth import require_role, get_password_hash
from coupongen.schemas.tenant import TenantCreate, TenantRead, TenantPurgeResult
from coupongen.schemas.user import UserCreate, UserRead
from coupongen.services import tenants as tenant_service

router = APIRouter(prefix="/admin", tags=["admin"])


# ============ Tenant Management ============

@router.get("/tenants", response_model=List[TenantRead])
async def list_tenants(
    current_user: User = Depends(require_role(UserRole.SUPERADMIN)),
    db: Session = Depends(get_db)
):
    """List all tenants."""
    return tenant_service.list_tenants(db)


@router.post("/tenants", response_model=TenantRead, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant: TenantCreate,
    current_user: User = Depends(require_role(UserRole.SUPERADMIN)),
    db: Session = Depends(get_db)
):
    """Create a new tenant."""
    return tenant_service.create_tenant(
        db, tenant.slug, name=tenant.name, email_from_name=tenant.email_from_name
    )


@router.delete("/tenants/{tenant_id}", response_model=TenantPurgeResult)
async def purge_tenant(
    tenant_id: UUID,
    current_user: User = Depends(require_role(UserRole.SUPERADMIN)),
    db: Session = Depends(get_db)
):
    """Delete a tenant together with its campaigns, links, coupons and users."""
    result = tenant_service.purge_tenant(db, tenant_id)
    return TenantPurgeResult(tenant_id=result.tenant_id, deleted=result.deleted)


# ============ User Management ============

@router.get("/tenants/{tenant_id}/users", response_model=List[UserRead])
async def list_tenant_users(
    tenant_id: UUID,
    current_user: User = Depends(require_role(UserRole.SUPERADMIN)),
    db: Session = Depends(get_db)
):
    """List back-office users of a tenant."""
    tenant_service.get_tenant(db, tenant_id)
    return db.query(User).filter(User.tenant_id == tenant_id).order_by(User.created_at).all()


@router.post("/tenants/{tenant_id}/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_tenant_user(
    tenant_id: UUID,
    user: UserCreate,
    current_user: User = Depends(require_role(UserRole.SUPERADMIN)),
    db: Session = Depends(get_db)
):
    """Create an admin or store account for a tenant."""
    return tenant_service.create_tenant_user(
        db,
        tenant_id,
        username=user.username,
        hashed_password=get_password_hash(user.password),
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
    )
