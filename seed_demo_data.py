"""
Seed a demo studio: "Aperture Studios", firm PIN 1234.
Run:  python seed_demo_data.py

Everything goes through the use cases, so balances and the activity feed
look exactly as if the data had been entered in the app.

Login afterwards with PIN 1234, username "sarah", password "password123".
"""
import sys
from datetime import timedelta
from decimal import Decimal

# ── bootstrap ────────────────────────────────────────────────────
from studiodesk.infrastructure.db.session import get_session_factory, init_storage
from studiodesk.application.firms import FirmQueryService

init_storage()
db = get_session_factory()()

if FirmQueryService(db).get_firm_by_pin("1234"):
    print("Demo firm already exists (PIN 1234)")
    db.close()
    sys.exit(0)

# ── use cases ────────────────────────────────────────────────────
from studiodesk.application.accounts import SignupUseCase, AddTeamMemberUseCase
from studiodesk.application.clients import CreateClientUseCase
from studiodesk.application.events import CreateEventUseCase
from studiodesk.application.expenses import CreateExpenseUseCase
from studiodesk.application.payments import RecordPaymentUseCase
from studiodesk.application.tasks import CreateTaskUseCase, UpdateTaskStatusUseCase
from studiodesk.domain.event import EventStatus
from studiodesk.domain.payment import PaymentMethod
from studiodesk.domain.task import TaskStatus, TaskPriority
from studiodesk.domain.user import UserRole
from studiodesk.utils.clock import utcnow

PASSWORD = "password123"
now = utcnow()

# ═══════════════════════════════════════════════════════════════
# Firm and team
# ═══════════════════════════════════════════════════════════════
signup = SignupUseCase(db).execute(
    email="sarah@aperturestudios.com",
    password=PASSWORD,
    first_name="Sarah",
    last_name="Johnson",
    phone="9876543210",
    role=UserRole.ADMIN,
    firm_name="Aperture Studios",
    firm_pin="1234",
)
firm_id = signup.firm.id
admin_id = signup.user.id

add_member = AddTeamMemberUseCase(db)
rahul = add_member.execute(
    firm_id=firm_id, actor_user_id=admin_id,
    email="rahul@aperturestudios.com", password=PASSWORD,
    first_name="Rahul", last_name="Kumar", phone="9123456789",
    role=UserRole.PHOTOGRAPHER,
)
maya = add_member.execute(
    firm_id=firm_id, actor_user_id=admin_id,
    email="maya@aperturestudios.com", password=PASSWORD,
    first_name="Maya", last_name="Patel", phone="9234567890",
    role=UserRole.VIDEOGRAPHER,
)
print(f"Firm #{firm_id} with team: Sarah (admin), Rahul, Maya")

# ═══════════════════════════════════════════════════════════════
# Clients and events
# ═══════════════════════════════════════════════════════════════
add_client = CreateClientUseCase(db)
wedding_client = add_client.execute(
    firm_id=firm_id, actor_user_id=admin_id,
    name="Arjun & Priya's Wedding", phone="9345678901", email="arjun.priya@email.com",
    address="MG Road, Bangalore, Karnataka 560001",
    notes="Traditional South Indian wedding, outdoor ceremony preferred",
)
corporate_client = add_client.execute(
    firm_id=firm_id, actor_user_id=admin_id,
    name="Tech Innovations Corp", phone="9456789012", email="events@techinnovations.com",
    address="Electronic City, Bangalore, Karnataka 560100",
    notes="Annual company event, need professional headshots for leadership team",
)
birthday_client = add_client.execute(
    firm_id=firm_id, actor_user_id=admin_id,
    name="Baby Aarav's First Birthday", phone="9567890123", email="aarav.parents@email.com",
    address="Koramangala, Bangalore, Karnataka 560034",
)

book = CreateEventUseCase(db)
wedding = book.execute(
    firm_id=firm_id, actor_user_id=admin_id, client_id=wedding_client.id,
    title="Arjun & Priya's Wedding Photography",
    description="Full day wedding coverage including mehendi, ceremony and reception",
    event_type="wedding", event_date=now + timedelta(days=7),
    venue="Palace Grounds, Bangalore", status=EventStatus.CONFIRMED,
    total_amount=Decimal("85000"), advance_amount=Decimal("50000"),
    payment_method=PaymentMethod.BANK_TRANSFER,
    photographer_id=rahul.id, videographer_id=maya.id,
)
book.execute(
    firm_id=firm_id, actor_user_id=admin_id, client_id=corporate_client.id,
    title="Tech Innovations Annual Meet",
    description="Corporate event photography and team headshots",
    event_type="corporate", event_date=now + timedelta(days=14),
    venue="Taj West End, Bangalore", status=EventStatus.PENDING,
    total_amount=Decimal("45000"), photographer_id=rahul.id,
)
birthday = book.execute(
    firm_id=firm_id, actor_user_id=admin_id, client_id=birthday_client.id,
    title="Aarav's Birthday Celebration",
    description="First birthday party photography",
    event_type="birthday", event_date=now + timedelta(days=3),
    venue="Cubbon Park, Bangalore", status=EventStatus.CONFIRMED,
    total_amount=Decimal("15000"), photographer_id=rahul.id,
)
RecordPaymentUseCase(db).execute(
    firm_id=firm_id, actor_user_id=admin_id, event_id=birthday.id,
    amount=Decimal("7500"), payment_method=PaymentMethod.UPI,
    payment_date=now - timedelta(days=1), notes="Advance payment for birthday shoot",
)

# ═══════════════════════════════════════════════════════════════
# Tasks and expenses
# ═══════════════════════════════════════════════════════════════
assign = CreateTaskUseCase(db)
assign.execute(
    firm_id=firm_id, actor_user_id=admin_id, event_id=wedding.id, assigned_to=rahul.id,
    title="Equipment check for wedding",
    description="Verify all cameras, lenses, lighting equipment and backup gear",
    task_type="preparation", priority=TaskPriority.HIGH, due_date=now + timedelta(days=5),
)
scouting = assign.execute(
    firm_id=firm_id, actor_user_id=admin_id, event_id=wedding.id, assigned_to=rahul.id,
    title="Location scouting for wedding",
    description="Visit venue and plan shot compositions",
    task_type="preparation", due_date=now + timedelta(days=3),
)
UpdateTaskStatusUseCase(db).execute(scouting, TaskStatus.IN_PROGRESS, actor_user_id=rahul.id)

CreateExpenseUseCase(db).execute(
    firm_id=firm_id, actor_user_id=admin_id,
    title="Camera lens rental", description="85mm portrait lens for the wedding",
    amount=Decimal("3500"), category="equipment", expense_date=now - timedelta(days=2),
)

print("Demo data ready. Login: PIN 1234 / sarah / password123")
db.close()
