"""
Maturity Assessment Questions

Question catalog organized by category:
1. Basic information
2. Financial
3. Digital presence & website
4. Social media
5. Market & competition
6. Brand
7. Customers
8. Data & analytics
9. Operations (inventory, supply chain)
10. Risk
11. Technology & growth

Each question has:
- ID, category and the answer field analyzers read
- Localized text and help text
- Type, options and validation rules
- Display order, priority and sector applicability
- A follow-up flag for deep-dive questions that only enter the flow via a rule
- A history flag for questions that make no sense for a business under a year old
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple
import logging

from ..exceptions import InvalidAnswer

logger = logging.getLogger(__name__)

# Category definitions
CATEGORIES = {
    "basic_info": {"id": "basic_info", "name": "Basic Information"},
    "financial": {"id": "financial", "name": "Financial"},
    "digital_presence": {"id": "digital_presence", "name": "Digital Presence"},
    "website": {"id": "website", "name": "Website"},
    "social_media": {"id": "social_media", "name": "Social Media"},
    "competition": {"id": "competition", "name": "Market & Competition"},
    "brand": {"id": "brand", "name": "Brand"},
    "customers": {"id": "customers", "name": "Customers"},
    "data_analytics": {"id": "data_analytics", "name": "Data & Analytics"},
    "operations": {"id": "operations", "name": "Operations"},
    "inventory": {"id": "inventory", "name": "Inventory"},
    "supply_chain": {"id": "supply_chain", "name": "Supply Chain"},
    "risk": {"id": "risk", "name": "Risk"},
    "technology": {"id": "technology", "name": "Technology"},
    "growth_readiness": {"id": "growth_readiness", "name": "Growth Readiness"},
    "deep_dive": {"id": "deep_dive", "name": "Deep Dive"},
}

# Standard yes/no options
YES_NO_OPTIONS = [
    {"value": "yes", "label": "Yes"},
    {"value": "no", "label": "No"},
]

TREND_OPTIONS = [
    {"value": "growing", "label": "Growing"},
    {"value": "stable", "label": "Stable"},
    {"value": "declining", "label": "Declining"},
]

LEVEL_OPTIONS = [
    {"value": "low", "label": "Low"},
    {"value": "medium", "label": "Medium"},
    {"value": "high", "label": "High"},
]


@dataclass(frozen=True)
class Question:
    """A single catalog question. Reference data, never mutated by the pipeline."""
    id: str
    category: str
    field: str
    question_type: str
    text: Mapping[str, str]
    display_order: int
    subcategory: Optional[str] = None
    is_required: bool = True
    priority: str = "medium"
    applicable_sectors: FrozenSet[str] = frozenset({"all"})
    options: Tuple[Dict[str, Any], ...] = ()
    validation_rules: Mapping[str, Any] = field(default_factory=dict)
    help_text: str = ""
    is_follow_up: bool = False
    requires_history: bool = False
    is_active: bool = True

    def applies_to(self, sector: Optional[str]) -> bool:
        """True if the question is asked for this sector."""
        return "all" in self.applicable_sectors or sector in self.applicable_sectors

    def get_text(self, locale: str = "en") -> str:
        return self.text.get(locale) or self.text.get("en", "")

    def option_values(self) -> List[Any]:
        return [o["value"] for o in self.options]

    def validate(self, value: Any) -> None:
        """Raise InvalidAnswer if value does not fit this question."""
        rules = self.validation_rules

        if self.question_type in ("numeric", "scale"):
            if isinstance(value, bool):
                raise InvalidAnswer(f"Expected a number for {self.id}", question_id=self.id, value=value)
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise InvalidAnswer(f"Expected a number for {self.id}", question_id=self.id, value=value)
            if "min" in rules and number < rules["min"]:
                raise InvalidAnswer(f"Value below minimum {rules['min']} for {self.id}",
                                    question_id=self.id, value=value)
            if "max" in rules and number > rules["max"]:
                raise InvalidAnswer(f"Value above maximum {rules['max']} for {self.id}",
                                    question_id=self.id, value=value)

        elif self.question_type == "single_choice":
            if value not in self.option_values():
                raise InvalidAnswer(f"'{value}' is not an option of {self.id}", question_id=self.id, value=value)

        elif self.question_type == "multiple_choice":
            if not isinstance(value, (list, tuple)):
                raise InvalidAnswer(f"Expected a list of options for {self.id}", question_id=self.id, value=value)
            allowed = self.option_values()
            unknown = [v for v in value if v not in allowed]
            if unknown:
                raise InvalidAnswer(f"Unknown options {unknown} for {self.id}", question_id=self.id, value=value)

        elif self.question_type == "text":
            if not isinstance(value, str):
                raise InvalidAnswer(f"Expected text for {self.id}", question_id=self.id, value=value)
            max_length = rules.get("max_length")
            if max_length and len(value) > max_length:
                raise InvalidAnswer(f"Text longer than {max_length} characters for {self.id}",
                                    question_id=self.id, value=value)

    def normalize(self, value: Any) -> Optional[Dict[str, Any]]:
        """Derive the structured form of a raw answer value."""
        if value is None:
            return None
        if self.question_type == "numeric":
            return {"number": float(value)}
        if self.question_type == "scale":
            return {"scale": int(round(float(value)))}
        if self.question_type == "multiple_choice":
            return {"selected": list(value), "count": len(value)}
        if self.question_type == "single_choice":
            return {"choice": value}
        return {"text": str(value).strip()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "category_name": CATEGORIES.get(self.category, {}).get("name", self.category),
            "subcategory": self.subcategory,
            "field": self.field,
            "question_type": self.question_type,
            "text": dict(self.text),
            "help_text": self.help_text,
            "is_required": self.is_required,
            "priority": self.priority,
            "display_order": self.display_order,
            "applicable_sectors": sorted(self.applicable_sectors),
            "options": [dict(o) for o in self.options],
            "validation_rules": dict(self.validation_rules),
            "is_follow_up": self.is_follow_up,
            "requires_history": self.requires_history,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Question":
        text = data["text"]
        if isinstance(text, str):
            text = {"en": text}
        return cls(
            id=data["id"],
            category=data["category"],
            field=data.get("field", data["id"]),
            question_type=data["question_type"],
            text=dict(text),
            display_order=int(data.get("display_order", 0)),
            subcategory=data.get("subcategory"),
            is_required=bool(data.get("is_required", True)),
            priority=data.get("priority", "medium"),
            applicable_sectors=frozenset(data.get("applicable_sectors", ["all"])),
            options=tuple(data.get("options", [])),
            validation_rules=dict(data.get("validation_rules", {})),
            help_text=data.get("help_text", ""),
            is_follow_up=bool(data.get("is_follow_up", False)),
            requires_history=bool(data.get("requires_history", False)),
            is_active=bool(data.get("is_active", True)),
        )


# Assessment questions in display order
ASSESSMENT_QUESTIONS: List[Dict[str, Any]] = [
    # =========================================================================
    # BASIC INFORMATION
    # =========================================================================
    {
        "id": "Q_BAS_001",
        "category": "basic_info",
        "field": "years_in_business",
        "question_type": "numeric",
        "text": {"en": "How many years has the business been operating?"},
        "display_order": 1,
        "priority": "high",
        "validation_rules": {"min": 0, "max": 200},
    },
    {
        "id": "Q_BAS_002",
        "category": "basic_info",
        "field": "employee_count",
        "question_type": "numeric",
        "text": {"en": "How many people work in the business?"},
        "display_order": 2,
        "validation_rules": {"min": 0},
    },
    {
        "id": "Q_BAS_003",
        "category": "basic_info",
        "subcategory": "goals",
        "field": "primary_goal",
        "question_type": "text",
        "text": {"en": "What is the single most important goal for the business this year?"},
        "display_order": 3,
        "priority": "high",
        "validation_rules": {"max_length": 500},
    },
    {
        "id": "Q_BAS_004",
        "category": "basic_info",
        "subcategory": "challenges",
        "field": "main_challenge",
        "question_type": "text",
        "text": {"en": "What is the biggest challenge holding the business back?"},
        "display_order": 4,
        "priority": "high",
        "validation_rules": {"max_length": 500},
    },

    # =========================================================================
    # FINANCIAL
    # =========================================================================
    {
        "id": "Q_FIN_001",
        "category": "financial",
        "field": "annual_revenue",
        "question_type": "numeric",
        "text": {"en": "What was the approximate annual revenue last year?"},
        "help_text": "Gross revenue before expenses, in your local currency.",
        "display_order": 10,
        "requires_history": True,
        "priority": "critical",
        "validation_rules": {"min": 0},
    },
    {
        "id": "Q_FIN_002",
        "category": "financial",
        "field": "revenue_trend",
        "question_type": "single_choice",
        "text": {"en": "How has revenue moved over the last 12 months?"},
        "display_order": 11,
        "requires_history": True,
        "priority": "critical",
        "options": TREND_OPTIONS,
    },
    {
        "id": "Q_FIN_DD_001",
        "category": "deep_dive",
        "field": "revenue_decline_duration",
        "question_type": "single_choice",
        "text": {"en": "Since when has the revenue decline persisted?"},
        "display_order": 11,
        "priority": "critical",
        "is_follow_up": True,
        "options": [
            {"value": "1_month", "label": "About a month"},
            {"value": "3_months", "label": "About 3 months"},
            {"value": "6_months", "label": "About 6 months"},
            {"value": "over_year", "label": "More than a year"},
        ],
    },
    {
        "id": "Q_FIN_003",
        "category": "financial",
        "field": "revenue_level",
        "question_type": "single_choice",
        "text": {"en": "How would you rate revenue compared with similar businesses?"},
        "display_order": 12,
        "options": LEVEL_OPTIONS,
    },
    {
        "id": "Q_FIN_004",
        "category": "financial",
        "field": "marketing_budget",
        "question_type": "numeric",
        "text": {"en": "What is the annual marketing budget?"},
        "display_order": 13,
        "priority": "high",
        "validation_rules": {"min": 0},
    },
    {
        "id": "Q_FIN_005",
        "category": "financial",
        "field": "use_accounting_software",
        "question_type": "single_choice",
        "text": {"en": "Do you use accounting software to track income and expenses?"},
        "display_order": 14,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # DIGITAL PRESENCE & WEBSITE
    # =========================================================================
    {
        "id": "Q_DIG_001",
        "category": "digital_presence",
        "field": "has_website",
        "question_type": "single_choice",
        "text": {"en": "Does the business have a website?"},
        "display_order": 20,
        "priority": "high",
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_DIG_002",
        "category": "website",
        "field": "mobile_responsive",
        "question_type": "single_choice",
        "text": {"en": "Does the website work well on mobile phones?"},
        "display_order": 21,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_DIG_003",
        "category": "website",
        "field": "has_ssl",
        "question_type": "single_choice",
        "text": {"en": "Is the website served over HTTPS?"},
        "display_order": 22,
        "priority": "low",
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_DIG_004",
        "category": "website",
        "field": "use_tracking_pixel",
        "question_type": "single_choice",
        "text": {"en": "Is a conversion tracking pixel installed on the website?"},
        "display_order": 23,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # SOCIAL MEDIA
    # =========================================================================
    {
        "id": "Q_SOC_001",
        "category": "social_media",
        "field": "active_platforms_count",
        "question_type": "numeric",
        "text": {"en": "On how many social media platforms is the business active?"},
        "display_order": 30,
        "validation_rules": {"min": 0, "max": 20},
    },
    {
        "id": "Q_SOC_002",
        "category": "social_media",
        "field": "social_engagement_rate",
        "question_type": "numeric",
        "text": {"en": "What is the average engagement rate on your posts (%)?"},
        "display_order": 31,
        "is_required": False,
        "validation_rules": {"min": 0, "max": 100},
    },
    {
        "id": "Q_SOC_003",
        "category": "social_media",
        "field": "run_paid_ads",
        "question_type": "single_choice",
        "text": {"en": "Do you run paid advertising campaigns?"},
        "display_order": 32,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # MARKET & COMPETITION
    # =========================================================================
    {
        "id": "Q_MKT_001",
        "category": "competition",
        "field": "competition_level",
        "question_type": "single_choice",
        "text": {"en": "How intense is competition in your market?"},
        "display_order": 40,
        "options": LEVEL_OPTIONS + [{"value": "very_high", "label": "Very high"}],
    },
    {
        "id": "Q_MKT_002",
        "category": "competition",
        "field": "competitor_count",
        "question_type": "numeric",
        "text": {"en": "How many direct competitors operate in your area?"},
        "display_order": 41,
        "validation_rules": {"min": 0},
    },
    {
        "id": "Q_MKT_003",
        "category": "competition",
        "field": "current_market_share",
        "question_type": "numeric",
        "text": {"en": "Roughly what share of your local market do you hold (%)?"},
        "display_order": 42,
        "is_required": False,
        "validation_rules": {"min": 0, "max": 100},
    },
    {
        "id": "Q_MKT_004",
        "category": "competition",
        "field": "conduct_regular_competitor_audit",
        "question_type": "single_choice",
        "text": {"en": "Do you review competitors' offers and prices regularly?"},
        "display_order": 43,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # BRAND
    # =========================================================================
    {
        "id": "Q_BRD_001",
        "category": "brand",
        "field": "has_visual_identity_guide",
        "question_type": "single_choice",
        "text": {"en": "Do you have a written visual identity (brand) guide?"},
        "display_order": 50,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_BRD_002",
        "category": "brand",
        "field": "brand_message",
        "question_type": "text",
        "text": {"en": "Describe your core marketing message in one or two sentences."},
        "display_order": 51,
        "is_required": False,
        "validation_rules": {"max_length": 500},
    },

    # =========================================================================
    # CUSTOMERS
    # =========================================================================
    {
        "id": "Q_CUS_001",
        "category": "customers",
        "field": "understand_customer_pain_points",
        "question_type": "single_choice",
        "text": {"en": "Do you know the main problems your customers are trying to solve?"},
        "display_order": 60,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_CUS_002",
        "category": "customers",
        "field": "customer_satisfaction",
        "question_type": "scale",
        "text": {"en": "How satisfied are your customers, on a scale of 1 to 10?"},
        "display_order": 61,
        "validation_rules": {"min": 1, "max": 10},
    },
    {
        "id": "Q_CUS_003",
        "category": "customers",
        "field": "churn_rate",
        "question_type": "numeric",
        "text": {"en": "What share of customers stop buying from you each year (%)?"},
        "display_order": 62,
        "requires_history": True,
        "is_required": False,
        "validation_rules": {"min": 0, "max": 100},
    },
    {
        "id": "Q_CUS_DD_001",
        "category": "deep_dive",
        "field": "churn_reasons",
        "question_type": "multiple_choice",
        "text": {"en": "What are the main reasons customers leave?"},
        "display_order": 62,
        "priority": "high",
        "is_follow_up": True,
        "options": [
            {"value": "price", "label": "Price too high"},
            {"value": "quality", "label": "Product or service quality"},
            {"value": "service", "label": "Customer service"},
            {"value": "competition", "label": "Competitor offers"},
            {"value": "unknown", "label": "We do not know"},
        ],
    },
    {
        "id": "Q_CUS_004",
        "category": "customers",
        "field": "has_customer_journey_map",
        "question_type": "single_choice",
        "text": {"en": "Have you mapped the customer journey from first contact to repeat purchase?"},
        "display_order": 63,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # DATA & ANALYTICS
    # =========================================================================
    {
        "id": "Q_DAT_001",
        "category": "data_analytics",
        "field": "uses_crm_system",
        "question_type": "single_choice",
        "text": {"en": "Do you keep customer records in a CRM system?"},
        "display_order": 70,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_DAT_002",
        "category": "data_analytics",
        "field": "tracks_kpis",
        "question_type": "single_choice",
        "text": {"en": "Do you track key performance indicators on a regular schedule?"},
        "display_order": 71,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # OPERATIONS
    # =========================================================================
    {
        "id": "Q_OPS_001",
        "category": "operations",
        "field": "has_documented_processes",
        "question_type": "single_choice",
        "text": {"en": "Are your core operating procedures documented?"},
        "display_order": 80,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_INV_001",
        "category": "inventory",
        "field": "inventory_tracking",
        "question_type": "single_choice",
        "text": {"en": "How do you track inventory levels?"},
        "display_order": 81,
        "options": [
            {"value": "none", "label": "We do not track inventory"},
            {"value": "manual", "label": "Manually or in spreadsheets"},
            {"value": "system", "label": "In an inventory system"},
        ],
    },
    {
        "id": "Q_SUP_001",
        "category": "supply_chain",
        "field": "supplier_count",
        "question_type": "numeric",
        "text": {"en": "How many suppliers do you depend on for core products?"},
        "display_order": 82,
        "is_required": False,
        "validation_rules": {"min": 0},
    },

    # =========================================================================
    # RISK
    # =========================================================================
    {
        "id": "Q_RSK_001",
        "category": "risk",
        "field": "has_business_insurance",
        "question_type": "single_choice",
        "text": {"en": "Is the business covered by liability or commercial insurance?"},
        "display_order": 90,
        "options": YES_NO_OPTIONS,
    },

    # =========================================================================
    # TECHNOLOGY & GROWTH
    # =========================================================================
    {
        "id": "Q_TEC_001",
        "category": "technology",
        "field": "uses_ai_tools_currently",
        "question_type": "single_choice",
        "text": {"en": "Does the team use AI tools in day-to-day work?"},
        "display_order": 100,
        "options": YES_NO_OPTIONS,
    },
    {
        "id": "Q_GRW_001",
        "category": "growth_readiness",
        "field": "growth_plans",
        "question_type": "multiple_choice",
        "text": {"en": "Which growth moves are you considering?"},
        "display_order": 110,
        "is_required": False,
        "priority": "low",
        "options": [
            {"value": "new_locations", "label": "Open new locations"},
            {"value": "new_products", "label": "Launch new products or services"},
            {"value": "online_sales", "label": "Sell online"},
            {"value": "new_segments", "label": "Target new customer segments"},
        ],
    },
    {
        "id": "Q_EDU_001",
        "category": "operations",
        "subcategory": "capacity",
        "field": "enrollment_utilization",
        "question_type": "numeric",
        "text": {"en": "What share of your enrollment capacity is filled (%)?"},
        "display_order": 111,
        "applicable_sectors": ["education"],
        "validation_rules": {"min": 0, "max": 100},
    },
]


class QuestionCatalog:
    """
    Read-only question provider.

    Example:
        catalog = QuestionCatalog.default()
        first = catalog.get_active_questions("retail")[0]
        question = catalog.get_question_by_id("Q_FIN_002")
    """

    def __init__(self, questions: List[Question]):
        self._questions = sorted(questions, key=lambda q: (q.display_order, q.id))
        self._by_id = {q.id: q for q in self._questions}

    @classmethod
    def default(cls) -> "QuestionCatalog":
        return cls([Question.from_dict(q) for q in ASSESSMENT_QUESTIONS])

    def get_active_questions(
        self,
        sector: Optional[str] = None,
        include_follow_ups: bool = False
    ) -> List[Question]:
        """Active questions for a sector, ordered by display order."""
        return [
            q for q in self._questions
            if q.is_active
            and (include_follow_ups or not q.is_follow_up)
            and (sector is None or q.applies_to(sector))
        ]

    def get_question_by_id(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def field_map(self) -> Dict[str, str]:
        """question_id -> answer field"""
        return {q.id: q.field for q in self._questions}

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)


# Singleton instance
_catalog: Optional[QuestionCatalog] = None


def get_default_catalog() -> QuestionCatalog:
    """Get or create the singleton default catalog"""
    global _catalog
    if _catalog is None:
        _catalog = QuestionCatalog.default()
        logger.info(f"Loaded question catalog with {len(_catalog)} questions")
    return _catalog
