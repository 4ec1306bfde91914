from app.core.database import Base, SessionLocal, engine
from app.models import Item, Sale, SaleItem, User
from app.services.sale_service import create_sale

from faker import Faker
import random
from datetime import datetime, timedelta, timezone

fake = Faker()

Base.metadata.create_all(bind=engine)
db = SessionLocal()

try:
    print("🔄 Clearing existing data...")
    db.query(SaleItem).delete()
    db.query(Sale).delete()
    db.query(Item).delete()
    db.query(User).delete()
    db.commit()
    print("✅ Data cleared.")

    print("🔄 Creating users and items...")
    users = [
        User(name=fake.name(), email=fake.unique.email())
        for _ in range(random.randint(5, 10))
    ]
    items = [
        Item(
            item_name=fake.unique.word().title(),
            stock=random.randint(50, 500),
            supplier=fake.company(),
            reorder_level=random.randint(5, 40),
        )
        for _ in range(random.randint(20, 30))
    ]
    db.add_all(users + items)
    db.commit()
    print(f"✅ Seeded {len(users)} users")
    print(f"✅ Seeded {len(items)} items")

    print("🔄 Creating sales over the past year...")
    now = datetime.now(timezone.utc)
    sale_count = random.randint(80, 120)
    for _ in range(sale_count):
        lines = [
            {"item_id": item.id, "quantity": random.randint(1, 5)}
            for item in random.sample(items, random.randint(1, 4))
        ]
        create_sale(
            db,
            user_id=random.choice(users).id,
            items=lines,
            date=now - timedelta(days=random.randint(0, 400), minutes=random.randint(0, 1440)),
        )
    print(f"✅ Seeded {sale_count} sales, stock reconciled")

except Exception as e:
    db.rollback()
    print(f"❌ Seeding failed: {e}")
    raise
finally:
    db.close()
