"""
Seed a demo cleaner and a few bookings into the configured store.

    python scripts/seed_cleaner.py [cleaner_id]
"""
import sys
from datetime import timedelta

from cleanclick.api.deps import get_now
from cleanclick.booking_models import BookingCreate, Frequency, ServiceType, TimeBlock
from cleanclick.core.config import settings
from cleanclick.errors import CleanClickError
from cleanclick.repositories import get_repository
from cleanclick.scheduling.booking import create_booking
from cleanclick.scheduling.defaults import default_cleaner
from cleanclick.scheduling.schedule import next_open_days

SAMPLE_CUSTOMERS = [
    ("Jane Doe", "555-0101", "12 Oak Street", Frequency.ONE_TIME, ServiceType.REGULAR),
    ("John Smith", "555-0102", "48 Pine Avenue", Frequency.WEEKLY, ServiceType.DEEP),
    ("Ana Lopez", "555-0103", "7 Cedar Lane", Frequency.MONTHLY, ServiceType.MOVE),
]


def seed_cleaner(cleaner_id: str = "cleaner-demo") -> None:
    repository = get_repository()
    print(f"Using {settings.storage_backend} storage")

    cleaner = repository.create_cleaner(
        default_cleaner(
            cleaner_id,
            name="Demo Cleaner",
            email="demo@cleanclick.local",
            strategy=settings.DEFAULT_PRICING_STRATEGY,
        )
    )
    print(f"Cleaner ready: {cleaner.name} (ID: {cleaner.id})")

    now = get_now()
    # Start tomorrow so no seed booking runs into today's cutoff
    open_days = [d for d in next_open_days(cleaner, now.date() + timedelta(days=1), 14) if d.is_open]

    created = 0
    for opening, (name, phone, address, frequency, service_type) in zip(open_days, SAMPLE_CUSTOMERS):
        request = BookingCreate(
            cleaner_id=cleaner.id,
            customer_name=name,
            customer_phone=phone,
            customer_address=address,
            bedrooms=2,
            bathrooms=1,
            frequency=frequency,
            service_type=service_type,
            date=opening.date.isoformat(),
            time_block=TimeBlock.MORNING,
        )
        try:
            booking = create_booking(repository, request, now)
        except CleanClickError as e:
            print(f"  [-] Skipped {opening.date}: {e.message}")
            continue
        created += 1
        print(f"  [+] Booked {booking.date} {booking.time_block.value} for {name}: ${booking.total_price}")

    print(f"\nSuccessfully seeded {created} bookings for cleaner {cleaner.id}")


if __name__ == "__main__":
    # Optional: Pass cleaner ID as arg
    cid = sys.argv[1] if len(sys.argv) > 1 else "cleaner-demo"
    seed_cleaner(cid)
