"""
Reference data for quote generation and representative matching.
Provider list, rate tables, catalogs and the representative roster.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

from quote_advisor.pipeline.models import Discount, Provider, Representative


DEFAULT_PROVIDERS: Tuple[Provider, ...] = (
    Provider(
        id="santam",
        name="Santam",
        rating=4.3,
        multiplier=1.1,
        supported_types=("auto", "home", "business"),
        website="https://www.santam.co.za",
        phone="0860 44 44 44",
        email="info@santam.co.za",
        license_number="FSP3416",
        features=("24/7 Claims", "Accident Assist", "Client Portal"),
        headquarters="Cape Town, South Africa",
    ),
    Provider(
        id="discovery",
        name="Discovery Insure",
        rating=4.5,
        multiplier=1.2,
        supported_types=("auto", "home", "life", "health"),
        website="https://www.discovery.co.za",
        phone="0860 99 88 77",
        email="insure@discovery.co.za",
        license_number="FSP48657",
        features=("Vitality Benefits", "DQ-Track", "Wellness Programs"),
        headquarters="Johannesburg, South Africa",
    ),
    Provider(
        id="outsurance",
        name="Outsurance",
        rating=4.1,
        multiplier=0.95,
        supported_types=("auto", "home", "life"),
        website="https://www.outsurance.co.za",
        phone="0860 68 87 87",
        email="info@outsurance.co.za",
        license_number="FSP15805",
        features=("Fixed Excess", "Direct Claims", "No Broker Fees"),
        headquarters="Centurion, South Africa",
    ),
)

# Monthly base premium range per insurance line
BASE_RATES: Mapping[str, Tuple[int, int]] = MappingProxyType({
    "auto": (800, 2500),
    "home": (400, 1200),
    "life": (200, 800),
    "business": (1500, 5000),
    "public-liability": (300, 1000),
    "engineering-construction": (2000, 8000),
})
DEFAULT_BASE_RATE: Tuple[int, int] = (500, 2000)

# Coverage amount = premium * multiplier
COVERAGE_MULTIPLIERS: Mapping[str, int] = MappingProxyType({
    "auto": 100,
    "home": 80,
    "life": 200,
    "business": 150,
    "public-liability": 120,
    "engineering-construction": 300,
})
DEFAULT_COVERAGE_MULTIPLIER = 100

FEATURE_CATALOG: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "auto": ("Comprehensive Cover", "24/7 Roadside Assistance", "Accident Management", "Rental Car Cover"),
    "home": ("Building Cover", "Contents Cover", "Portable Possessions", "Emergency Accommodation"),
    "life": ("Death Benefit", "Disability Cover", "Critical Illness", "Funeral Benefits"),
    "business": ("Public Liability", "Professional Indemnity", "Business Interruption", "Cyber Protection"),
    "public-liability": ("Third Party Cover", "Legal Costs", "Product Liability", "Advertising Liability"),
    "engineering-construction": (
        "All Risks Cover", "Third Party Liability", "Delays in Start-Up", "Professional Indemnity"
    ),
})
DEFAULT_FEATURES: Tuple[str, ...] = ("Standard Cover", "Claims Support", "Policy Management")

EXCLUSION_CATALOG: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "auto": ("Racing or Speed Tests", "Unlicensed Drivers", "Wear and Tear"),
    "home": ("War and Nuclear Risks", "Gradual Deterioration", "Unattended Property"),
    "life": ("Suicide (first 2 years)", "War and Military Action", "Self-inflicted Injuries"),
    "business": ("Nuclear Risks", "Terrorism", "Cyber Attacks (basic cover)"),
})
DEFAULT_EXCLUSIONS: Tuple[str, ...] = ("Standard Exclusions Apply",)

DISCOUNT_CATALOG: Tuple[Discount, ...] = (
    Discount(type="multi-policy", description="Multiple Policy Discount", amount=10, is_percentage=True),
    Discount(type="no-claims", description="No Claims Bonus", amount=15, is_percentage=True),
    Discount(type="security", description="Security Features Discount", amount=5, is_percentage=True),
)

DEFAULT_REPRESENTATIVES: Tuple[Representative, ...] = (
    Representative(
        id="rep-001",
        name="Thabang",
        surname="Mulaudzi",
        email="thabang@mibrokersa.co.za",
        specializations=(
            "auto", "buildings-insurance", "household-contents",
            "commercial-property", "small-business", "e-hailing",
        ),
        rating=4.9,
        active_clients=38,
    ),
    Representative(
        id="rep-002",
        name="Dineo",
        surname="Mogale",
        email="dineo@mibrokersa.co.za",
        specializations=(
            "transport-insurance", "aviation-marine", "public-liability",
            "body-corporates", "e-hailing",
        ),
        rating=4.8,
        active_clients=42,
    ),
    Representative(
        id="rep-003",
        name="OK",
        surname="Nkadimeng",
        email="ok.nkadimeng@mibrokersa.co.za",
        specializations=(
            "engineering-construction", "aviation-marine", "public-liability",
            "mining-rehabilitation",
        ),
        rating=4.7,
        active_clients=35,
    ),
    Representative(
        id="rep-004",
        name="Mandla",
        surname="Mavembeka",
        email="mandla@mibrokersa.co.za",
        specializations=("auto", "buildings-insurance", "household-contents", "small-business"),
        rating=4.8,
        active_clients=45,
    ),
    Representative(
        id="rep-005",
        name="Lerato",
        surname="Mokoena",
        email="lerato.mokoena@mibrokersa.co.za",
        specializations=(
            "commercial-property", "body-corporates", "engineering-construction",
            "mining-rehabilitation",
        ),
        rating=4.85,
        active_clients=40,
    ),
)

INSURANCE_TYPE_TITLES: Mapping[str, str] = MappingProxyType({
    "auto": "Car Insurance",
    "home": "Home Insurance",
    "life": "Commercial Property",
    "health": "Medical Aid",
    "business": "Business Insurance",
    "buildings-insurance": "Buildings Insurance",
    "household-contents": "Household Contents",
    "public-liability": "Public Liability",
    "small-business": "Small Business Insurance",
    "commercial-property": "Commercial Property",
    "transport-insurance": "Transport Insurance",
    "body-corporates": "Body Corporates",
    "engineering-construction": "Engineering & Construction",
    "aviation-marine": "Aviation & Marine",
    "mining-rehabilitation": "Mining Rehabilitation Guarantees",
    "e-hailing": "E-Hailing Insurance",
})
