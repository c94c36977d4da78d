"""
Request/response models shared by the JSON routers.

Bodies and responses use camelCase on the wire (firmPin, totalAmount, ...);
Python code keeps snake_case. Decimal amounts serialize as strings.
"""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from studiodesk.application.events import EventView
from studiodesk.application.tasks import TaskView
from studiodesk.domain.event import EventStatus
from studiodesk.domain.payment import PaymentMethod
from studiodesk.domain.quotation import QuotationStatus
from studiodesk.domain.task import TaskStatus, TaskPriority
from studiodesk.domain.user import UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# === Auth / firms ===

class PinLoginRequest(CamelModel):
    firm_pin: str = Field(min_length=4)
    username: str = Field(min_length=1)
    password: str = Field(min_length=6)


class EmailLoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SignupRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: str
    role: UserRole
    firm_id: int | None = None
    firm_name: str | None = None  # admin only, defaults to "<First> <Last> Studio"
    firm_pin: str | None = None   # admin: new PIN, generated when omitted; others: PIN of the firm to join


class FirmSetupRequest(CamelModel):
    name: str
    pin: str | None = None


class TeamMemberCreate(CamelModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: str
    role: UserRole


class FirmPublicResponse(CamelModel):
    id: int
    name: str


class FirmResponse(CamelModel):
    id: int
    name: str
    pin: str
    is_active: bool


class UserResponse(CamelModel):
    # password_hash is never exposed
    id: int
    firm_id: int | None
    email: str
    first_name: str
    last_name: str
    phone: str
    role: UserRole
    is_active: bool
    created_at: datetime


class SessionResponse(CamelModel):
    user: UserResponse
    firm: FirmResponse | None


# === Clients ===

class ClientCreate(CamelModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: EmailStr | None = None
    address: str | None = None
    notes: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ClientResponse(CamelModel):
    id: int
    firm_id: int
    name: str
    email: str | None
    phone: str
    address: str | None
    notes: str | None
    created_at: datetime


# === Events ===

class EventCreate(CamelModel):
    client_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    event_type: str = Field(min_length=1)
    event_date: datetime
    venue: str | None = None
    status: EventStatus = EventStatus.SCHEDULED
    total_amount: Decimal
    advance_amount: Decimal = Decimal("0")
    payment_method: PaymentMethod = PaymentMethod.CASH  # used for the advance
    photographer_id: int | None = None
    videographer_id: int | None = None


class EventStatusUpdate(CamelModel):
    status: EventStatus


class UserSummary(CamelModel):
    id: int
    first_name: str
    last_name: str
    role: UserRole


class EventResponse(CamelModel):
    id: int
    firm_id: int
    client_id: int
    title: str
    description: str | None
    event_type: str
    event_date: datetime
    venue: str | None
    status: str
    total_amount: Decimal
    advance_amount: Decimal
    balance_amount: Decimal
    photographer_id: int | None
    videographer_id: int | None
    created_at: datetime
    updated_at: datetime


# === Tasks ===

class TaskCreate(CamelModel):
    event_id: int
    assigned_to: int
    title: str = Field(min_length=1)
    description: str | None = None
    task_type: str = Field(min_length=1)
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime


class TaskStatusUpdate(CamelModel):
    status: TaskStatus


class TaskResponse(CamelModel):
    id: int
    firm_id: int
    event_id: int
    assigned_to: int
    title: str
    description: str | None
    task_type: str
    status: str
    priority: str
    due_date: datetime
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class EventSummary(CamelModel):
    id: int
    title: str
    event_date: datetime
    status: str


# === Payments / expenses ===

class PaymentCreate(CamelModel):
    event_id: int
    amount: Decimal
    payment_method: PaymentMethod
    payment_date: datetime | None = None
    notes: str | None = None


class PaymentResponse(CamelModel):
    id: int
    firm_id: int
    event_id: int
    amount: Decimal
    payment_method: str
    payment_date: datetime
    notes: str | None
    received_by: int
    created_at: datetime


class ExpenseCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    amount: Decimal
    category: str = Field(min_length=1)
    expense_date: datetime | None = None


class ExpenseResponse(CamelModel):
    id: int
    firm_id: int
    title: str
    description: str | None
    amount: Decimal
    category: str
    expense_date: datetime
    created_by: int
    created_at: datetime


# === Composite views ===

class EventDetailResponse(EventResponse):
    client: ClientResponse
    photographer: UserSummary | None = None
    videographer: UserSummary | None = None
    tasks: list[TaskResponse] = []
    payments: list[PaymentResponse] = []

    @classmethod
    def from_view(cls, view: EventView) -> "EventDetailResponse":
        return cls(
            **EventResponse.model_validate(view.event).model_dump(),
            client=ClientResponse.model_validate(view.client),
            photographer=UserSummary.model_validate(view.photographer) if view.photographer else None,
            videographer=UserSummary.model_validate(view.videographer) if view.videographer else None,
            tasks=[TaskResponse.model_validate(t) for t in view.tasks],
            payments=[PaymentResponse.model_validate(p) for p in view.payments],
        )


class TaskDetailResponse(TaskResponse):
    assigned_user: UserSummary
    event: EventSummary
    client: ClientResponse

    @classmethod
    def from_view(cls, view: TaskView) -> "TaskDetailResponse":
        return cls(
            **TaskResponse.model_validate(view.task).model_dump(),
            assigned_user=UserSummary.model_validate(view.assigned_user),
            event=EventSummary.model_validate(view.event),
            client=ClientResponse.model_validate(view.client),
        )


# === Quotations ===

class QuotationCreate(CamelModel):
    client_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    event_type: str = Field(min_length=1)
    event_date: datetime
    venue: str = Field(min_length=1)
    total_amount: Decimal
    valid_until: datetime


class QuotationStatusUpdate(CamelModel):
    status: QuotationStatus


class QuotationResponse(CamelModel):
    id: int
    firm_id: int
    client_id: int
    title: str
    description: str | None
    event_type: str
    event_date: datetime
    venue: str
    total_amount: Decimal
    valid_until: datetime
    status: str
    event_id: int | None
    created_at: datetime
    updated_at: datetime


# === Activity / dashboard ===

class ActivityLogResponse(CamelModel):
    id: int
    firm_id: int
    user_id: int
    action: str
    entity_type: str
    entity_id: int
    description: str
    created_at: datetime


class DashboardStatsResponse(CamelModel):
    total_revenue: Decimal
    active_events: int
    pending_tasks: int
    team_members: int
    monthly_growth: float
    weekly_events: int
    tasks_today: int
    active_team_members: int


class FinancialSummaryResponse(CamelModel):
    total_revenue: Decimal
    received_amount: Decimal
    pending_amount: Decimal
    total_expenses: Decimal
    net_profit: Decimal
