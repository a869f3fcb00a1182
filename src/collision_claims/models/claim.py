"""Pydantic models for claims, damage assessments, estimates, and insurance info."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Role of a signed-in user."""

    BODY_SHOP = "body_shop"
    INSURANCE_ADJUSTER = "insurance_adjuster"
    CUSTOMER = "customer"


class ClaimStatus(str, Enum):
    """Claim lifecycle status.

    ANALYZING is a transient label shown while damage analysis runs; the store
    never persists it.
    """

    DRAFT = "draft"
    ANALYZING = "analyzing"
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUPPLEMENT_NEEDED = "supplement_needed"


class PhotoAngle(str, Enum):
    FRONT = "front"
    REAR = "rear"
    DRIVER_SIDE = "driver_side"
    PASSENGER_SIDE = "passenger_side"
    FRONT_DRIVER = "front_driver"
    FRONT_PASSENGER = "front_passenger"
    REAR_DRIVER = "rear_driver"
    REAR_PASSENGER = "rear_passenger"
    CLOSEUP = "closeup"


class DamageArea(str, Enum):
    """Vehicle body regions the damage analyzer can report."""

    FRONT_BUMPER = "front_bumper"
    HOOD = "hood"
    FENDER_LEFT = "fender_left"
    FENDER_RIGHT = "fender_right"
    DOOR_FRONT_LEFT = "door_front_left"
    DOOR_FRONT_RIGHT = "door_front_right"
    DOOR_REAR_LEFT = "door_rear_left"
    DOOR_REAR_RIGHT = "door_rear_right"
    QUARTER_PANEL_LEFT = "quarter_panel_left"
    QUARTER_PANEL_RIGHT = "quarter_panel_right"
    REAR_BUMPER = "rear_bumper"
    TRUNK = "trunk"
    ROOF = "roof"
    WINDSHIELD = "windshield"
    HEADLIGHT_LEFT = "headlight_left"
    HEADLIGHT_RIGHT = "headlight_right"
    TAILLIGHT_LEFT = "taillight_left"
    TAILLIGHT_RIGHT = "taillight_right"


class DamageSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class RepairType(str, Enum):
    REPAIR = "repair"
    REPLACE = "replace"


class InsuranceInfoStatus(str, Enum):
    """Completeness of a claim's insurance info. FLAGGED is set only by an adjuster."""

    NONE = "none"
    PARTIAL = "partial"
    COMPLETE = "complete"
    FLAGGED = "flagged"


class EstimateFormat(str, Enum):
    CCC_ONE = "ccc_one"
    MITCHELL = "mitchell"


class LineItemType(str, Enum):
    PART = "part"
    LABOR = "labor"
    PAINT = "paint"
    SUPPLIES = "supplies"


class User(BaseModel):
    """Signed-in user."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Sign-in email")
    company_name: str = Field(default="", description="Body shop, insurer, or customer display name")
    role: UserRole = Field(..., description="User role")
    created_at: datetime = Field(..., description="Account creation time")


class Vehicle(BaseModel):
    """Vehicle under repair. make/model are required before the claim proceeds past vehicle info."""

    year: int = Field(..., description="Model year")
    make: str = Field(default="", description="Vehicle manufacturer")
    model: str = Field(default="", description="Vehicle model")
    trim: Optional[str] = Field(default=None, description="Trim level")
    color: Optional[str] = Field(default=None, description="Exterior color")
    mileage: Optional[int] = Field(default=None, description="Odometer reading")
    vin: Optional[str] = Field(default=None, description="Vehicle identification number")


class Photo(BaseModel):
    """Captured damage photo. The uri is an opaque reference to the image data."""

    id: str = Field(..., description="Photo ID")
    uri: str = Field(..., description="Image reference")
    angle: Optional[PhotoAngle] = Field(default=None, description="Capture angle")
    timestamp: datetime = Field(..., description="Capture time")
    width: Optional[int] = Field(default=None, description="Width in pixels")
    height: Optional[int] = Field(default=None, description="Height in pixels")
    file_size: Optional[int] = Field(default=None, description="File size in bytes")
    quality_score: Optional[int] = Field(default=None, description="Photo quality score 0-100")
    quality_issues: list[str] = Field(default_factory=list, description="Detected quality issues")


class Part(BaseModel):
    """Affected part with pricing and labor estimates."""

    id: str = Field(..., description="Part ID")
    name: str = Field(..., description="Part name")
    category: str = Field(default="body", description="Part category")
    price: float = Field(default=0.0, description="Part price in dollars")
    labor_hours: float = Field(default=0.0, description="Labor hours to repair or replace")
    labor_rate: float = Field(default=85.0, description="Hourly labor rate in dollars")
    repair_type: RepairType = Field(default=RepairType.REPAIR, description="Repair or replace")


class DetectedDamage(BaseModel):
    """One damaged region found by the analyzer."""

    id: Optional[str] = Field(default=None, description="Damage ID")
    area: DamageArea = Field(..., description="Damaged body region")
    severity: DamageSeverity = Field(..., description="Damage severity")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence 0-1")
    affected_parts: list[Part] = Field(default_factory=list, description="Parts affected")
    repair_type: RepairType = Field(..., description="Repair or replace")
    damage_types: list[str] = Field(default_factory=list, description="e.g. scratch, dent, crack")


class DamageAssessment(BaseModel):
    """Output of damage analysis over a claim's photos."""

    detected_damages: list[DetectedDamage] = Field(
        default_factory=list, description="Detected damages in detection order"
    )
    confidence: float = Field(..., ge=0.0, le=1.0, description="Overall confidence 0-1")
    potential_hidden_damage: list[str] = Field(
        default_factory=list, description="Free-text hidden damage hints"
    )
    processing_time: float = Field(default=0.0, description="Simulated processing time (ms)")


class PreEstimateRange(BaseModel):
    low: float = Field(..., description="Low bound in dollars")
    typical: float = Field(..., description="Typical value in dollars")
    high: float = Field(..., description="High bound in dollars")


class RepairDays(BaseModel):
    min: int = Field(..., description="Minimum repair days")
    max: int = Field(..., description="Maximum repair days")


class PreEstimate(BaseModel):
    """Preliminary cost range shown right after damage detection."""

    id: str = Field(..., description="Pre-estimate ID")
    range: PreEstimateRange = Field(..., description="Cost range")
    confidence: int = Field(..., description="Confidence 0-100")
    based_on_damages: list[str] = Field(default_factory=list, description="Damage descriptions")
    similar_claims_count: int = Field(default=0, description="Number of comparable claims")
    estimated_repair_days: RepairDays = Field(..., description="Repair day range")
    generated_at: datetime = Field(..., description="Generation time")
    disclaimer: str = Field(default="", description="Disclaimer text")


class EstimateLineItem(BaseModel):
    type: LineItemType = Field(..., description="Line item category")
    description: str = Field(..., description="Line description")
    quantity: float = Field(..., description="Quantity (hours for labor, panels for paint)")
    unit_price: float = Field(..., description="Unit price in dollars")
    total: float = Field(..., description="Line total in dollars")
    part_id: Optional[str] = Field(default=None, description="Related part ID")


class Estimate(BaseModel):
    """Priced line-item repair estimate."""

    id: str = Field(..., description="Estimate ID")
    line_items: list[EstimateLineItem] = Field(default_factory=list, description="Ordered line items")
    subtotal: float = Field(..., description="Sum of line item totals")
    tax: float = Field(..., description="Sales tax")
    total: float = Field(..., description="Subtotal plus tax")
    format: EstimateFormat = Field(default=EstimateFormat.CCC_ONE, description="Output format")
    generated_at: datetime = Field(..., description="Generation time")
    expires_at: datetime = Field(..., description="Expiry time")


class InsuranceInfo(BaseModel):
    """Customer insurance details. Empty strings mean the field is absent."""

    provider: str = Field(default="", description="Insurance provider")
    policy_number: str = Field(default="", description="Policy number")
    claim_number: str = Field(default="", description="Insurer claim number")
    agent_name: str = Field(default="", description="Agent name")
    agent_phone: str = Field(default="", description="Agent phone")
    agent_email: str = Field(default="", description="Agent email")
    deductible: Optional[float] = Field(default=None, description="Deductible in dollars")


class Claim(BaseModel):
    """A vehicle-damage repair case."""

    id: str = Field(..., description="Claim ID")
    user_id: str = Field(..., description="Owning user ID")
    body_shop_id: Optional[str] = Field(default=None, description="Body shop user ID")
    body_shop_name: Optional[str] = Field(default=None, description="Body shop name")
    customer_id: Optional[str] = Field(default=None, description="Customer user ID")
    customer_name: Optional[str] = Field(default=None, description="Customer name")
    customer_email: Optional[str] = Field(default=None, description="Customer email")
    customer_phone: Optional[str] = Field(default=None, description="Customer phone")
    status: ClaimStatus = Field(default=ClaimStatus.DRAFT, description="Lifecycle status")
    vehicle: Vehicle = Field(..., description="Vehicle")
    photos: list[Photo] = Field(default_factory=list, description="Photos in capture order")
    damage_assessment: Optional[DamageAssessment] = Field(default=None)
    pre_estimate: Optional[PreEstimate] = Field(default=None)
    estimate: Optional[Estimate] = Field(default=None)
    insurance_info: Optional[InsuranceInfo] = Field(default=None)
    insurance_info_status: InsuranceInfoStatus = Field(default=InsuranceInfoStatus.NONE)
    insurance_info_flags: list[str] = Field(default_factory=list)
    insurance_info_locked_at: Optional[datetime] = Field(default=None)
    insurance_info_last_edited_by: Optional[str] = Field(default=None)
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")
    submitted_at: Optional[datetime] = Field(default=None)
    reviewed_at: Optional[datetime] = Field(default=None)
    reviewed_by: Optional[str] = Field(default=None)
    fraud_score: Optional[int] = Field(default=None, description="Fraud score 0-100 from review")
    rejection_reason: Optional[str] = Field(default=None)


class EstimateTier(str, Enum):
    BASIC = "basic"
    OEM = "oem"
    PREMIUM = "premium"


class BaseCosts(BaseModel):
    """Untiered cost components that the tier multipliers apply to."""

    parts: float = Field(default=0.0, description="Parts cost")
    labor: float = Field(default=0.0, description="Labor cost")
    paint: float = Field(default=0.0, description="Paint cost")
    shop_supplies: float = Field(default=0.0, description="Shop supplies cost")


class EstimateBreakdown(BaseModel):
    """Whole-dollar cost breakdown for one tier."""

    parts: int
    labor: int
    paint: int
    shop_supplies: int
    tax: int
    total: int


class EstimateOption(BaseModel):
    tier: EstimateTier
    title: str
    description: str
    breakdown: EstimateBreakdown
    total: int = Field(..., description="Total rounded to the nearest $10")
    features: list[str] = Field(default_factory=list)
    savings: Optional[int] = Field(default=None, description="Percent saved versus OEM")
    warranty: str
    timeline_estimate: str
    recommended: bool = False
    popular_choice: bool = False


class EstimateComparison(BaseModel):
    basic: EstimateOption
    oem: EstimateOption
    premium: EstimateOption


class FraudRecommendation(str, Enum):
    APPROVE = "approve"
    REVIEW = "review"
    INVESTIGATE = "investigate"


class FraudIndicator(BaseModel):
    type: str = Field(..., description="Indicator type, e.g. high_value")
    severity: str = Field(..., description="low, medium, or high")
    description: str


class FraudAnalysis(BaseModel):
    """Mock fraud scoring result."""

    score: int = Field(..., ge=0, le=100, description="0-100, higher is more suspicious")
    indicators: list[FraudIndicator] = Field(default_factory=list)
    recommendation: FraudRecommendation
    confidence: float = Field(..., description="Analysis confidence 0.75-0.95")
