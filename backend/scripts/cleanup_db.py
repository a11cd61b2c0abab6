"""Purge tenants left behind by smoke and integration runs."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from coupongen.database import SessionLocal
from coupongen.models.tenant import Tenant
from coupongen.services.tenants import purge_tenant


def cleanup(prefix: str = "test-"):
    db = SessionLocal()
    try:
        tenants = db.query(Tenant).filter(Tenant.slug.startswith(prefix)).all()
        print(f"Purging {len(tenants)} tenant(s) with slug prefix '{prefix}'...")
        for tenant in tenants:
            result = purge_tenant(db, tenant.id)
            print(f"  {tenant.slug}: {result.deleted}")
        print("Cleanup complete.")
    finally:
        db.close()


if __name__ == "__main__":
    cleanup(sys.argv[1] if len(sys.argv) > 1 else "test-")
