import asyncio
from datetime import datetime

from app.core.config import Settings
from app.database import build_store
from app.models.auth.user import UserCreate, UserRole
from app.services.auth.user_directory import UserDirectoryService
from app.services.exam.catalog import ExamCatalog, conducting_body_for, exam_sector_for
from app.store.base import DocumentStore, EXAMS, USERS

SEED_ACTOR = "seed"


async def seed_exams(store: DocumentStore, catalog: ExamCatalog) -> int:
    """
    Mirror the exam catalog into the exams collection.
    Documents are keyed by the catalog id, so re-running overwrites in place.
    """
    print("[*] Seeding exams...")

    for exam in catalog.exams:
        await store.set_by_id(EXAMS, str(exam.id), {
            "name": exam.name,
            "code": exam.code,
            "conducting_body": conducting_body_for(exam.code),
            "exam_sector": exam_sector_for(exam.code),
            "sub_exams": [sub_exam.model_dump() for sub_exam in exam.sub_exams],
            "updated_at": datetime.utcnow()
        })
        print(f"  [OK] {exam.name} ({len(exam.sub_exams)} sub-exams)")

    print(f"\n[SUCCESS] Exams seeded! Total: {len(catalog)}")
    return len(catalog)


async def seed_admin(store: DocumentStore, admin_id: str, admin_email: str) -> bool:
    """Create the first admin unless the id is already taken. Returns True when created."""
    print("\n[*] Seeding admin user...")

    if await store.get_by_id(USERS, admin_id):
        print(f"  [SKIP] User '{admin_id}' already exists")
        return False

    await UserDirectoryService(store).add_user(
        UserCreate(id=admin_id, email=admin_email, role=UserRole.ADMIN, name="Administrator"),
        actor_id=SEED_ACTOR
    )
    print(f"  [OK] Created admin: {admin_email}")
    return True


async def main(admin_email: str = None):
    """Main seed function"""
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)
    print()

    settings = Settings()
    store = build_store(settings)
    await store.init()

    try:
        await seed_exams(store, ExamCatalog.from_file(settings.exam_catalog_path))

        if admin_email:
            await seed_admin(store, admin_id=admin_email, admin_email=admin_email)

        print()
        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)

    except Exception as e:
        print()
        print("=" * 60)
        print(f"ERROR during seeding: {e}")
        print("=" * 60)
        import traceback
        traceback.print_exc()
    finally:
        await store.close()


if __name__ == "__main__":
    import sys

    # Optional: --admin <email>
    email = None
    if "--admin" in sys.argv:
        index = sys.argv.index("--admin")
        if index + 1 < len(sys.argv):
            email = sys.argv[index + 1]

    asyncio.run(main(admin_email=email))
