"""Application constants.

Regulatory tables and infrastructure settings live here. Every table is
read-only: lookups go through ``MappingProxyType`` so no caller can patch a
threshold at runtime.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

# ============================================================================
# Energy Calculation (IN 75/2020, Annex XXII)
# ============================================================================

# Conversion factors (kcal per gram)
ATWATER_CARBOHYDRATE = Decimal("4")
ATWATER_PROTEIN = Decimal("4")
ATWATER_FAT = Decimal("9")

KCAL_TO_KJ = Decimal("4.2")

# ============================================================================
# Reference Daily Values (IN 75/2020, Annex II)
# ============================================================================

# Keys match domain.models.Nutrient values. Total sugars has no reference.
VDR_TABLE = MappingProxyType(
    {
        "energy_kcal": Decimal("2000"),
        "energy_kj": Decimal("8400"),
        "carbohydrates": Decimal("300"),
        "added_sugars": Decimal("50"),
        "proteins": Decimal("50"),
        "total_fat": Decimal("65"),
        "saturated_fat": Decimal("20"),
        "trans_fat": Decimal("2"),
        "fiber": Decimal("25"),
        "sodium": Decimal("2000"),
    }
)

DAILY_VALUE_NOT_ESTABLISHED = "**"

# ============================================================================
# Insignificant Amounts (IN 75/2020, Annex IV)
# ============================================================================

# Values at or below these limits are declared as zero.
ZERO_LIMITS = MappingProxyType(
    {
        "energy_kcal": Decimal("4"),
        "carbohydrates": Decimal("0.5"),
        "proteins": Decimal("0.5"),
        "total_fat": Decimal("0.5"),
        "saturated_fat": Decimal("0.2"),
        "trans_fat": Decimal("0.2"),
        "fiber": Decimal("0.5"),
        "sodium": Decimal("5"),
    }
)

# ============================================================================
# Front-of-Package Labeling (RDC 429/2020, IN 75/2020 Annex XV)
# ============================================================================


@dataclass(frozen=True)
class FrontLabelThresholds:
    """Per-100 g (or ml) limits at or above which a "lupa" is required."""

    added_sugars_g: Decimal
    saturated_fat_g: Decimal
    sodium_mg: Decimal


FRONT_LABEL_LIMITS = MappingProxyType(
    {
        "solid": FrontLabelThresholds(
            added_sugars_g=Decimal("15"),
            saturated_fat_g=Decimal("6"),
            sodium_mg=Decimal("600"),
        ),
        "liquid": FrontLabelThresholds(
            added_sugars_g=Decimal("7.5"),
            saturated_fat_g=Decimal("3"),
            sodium_mg=Decimal("300"),
        ),
    }
)

FRONT_LABEL_WARNINGS = MappingProxyType(
    {
        "added_sugars": "ALTO EM AÇÚCARES ADICIONADOS",
        "saturated_fat": "ALTO EM GORDURAS SATURADAS",
        "sodium": "ALTO EM SÓDIO",
    }
)

REGULATORY_REFERENCES = ("RDC 429/2020", "IN 75/2020", "RDC 359/2003", "RDC 26/2015")

# ============================================================================
# Portion Presets (RDC 359/2003 reference portions)
# ============================================================================


@dataclass(frozen=True)
class PortionPreset:
    portion_g: Decimal
    household_measure: str


PORTION_CATEGORIES = MappingProxyType(
    {
        "paes": PortionPreset(Decimal("50"), "1 fatia"),
        "biscoitos": PortionPreset(Decimal("30"), "3 unidades"),
        "cereais": PortionPreset(Decimal("30"), "2 colheres de sopa"),
        "massas": PortionPreset(Decimal("80"), "1 concha"),
        "arroz": PortionPreset(Decimal("160"), "4 colheres de sopa"),
        "feijao": PortionPreset(Decimal("160"), "1 concha"),
        "carnes": PortionPreset(Decimal("100"), "1 bife médio"),
        "leite": PortionPreset(Decimal("200"), "1 copo"),
        "iogurte": PortionPreset(Decimal("200"), "1 pote"),
        "queijos": PortionPreset(Decimal("30"), "2 fatias"),
        "frutas": PortionPreset(Decimal("100"), "1 unidade"),
        "vegetais": PortionPreset(Decimal("100"), "3 colheres de sopa"),
        "sucos": PortionPreset(Decimal("200"), "1 copo"),
        "refrigerantes": PortionPreset(Decimal("200"), "1 copo"),
        "sobremesas": PortionPreset(Decimal("60"), "1 fatia pequena"),
        "sorvetes": PortionPreset(Decimal("60"), "1 bola"),
        "chocolate": PortionPreset(Decimal("25"), "5 quadradinhos"),
        "salgadinhos": PortionPreset(Decimal("30"), "1 xícara"),
        "molhos": PortionPreset(Decimal("15"), "1 colher de sopa"),
        "oleos": PortionPreset(Decimal("13"), "1 colher de sopa"),
    }
)

# ============================================================================
# Allergens (RDC 26/2015)
# ============================================================================

ALLERGEN_KEYWORDS = MappingProxyType(
    {
        "gluten": ("trigo", "centeio", "cevada", "aveia", "farinha de trigo", "farinha de centeio"),
        "trigo": ("trigo", "farinha de trigo"),
        "crustaceos": ("camarão", "lagosta", "caranguejo", "siri"),
        "ovos": ("ovo", "ovos", "clara", "gema", "albumina"),
        "peixes": ("peixe", "atum", "sardinha", "bacalhau", "salmão"),
        "amendoim": ("amendoim", "pasta de amendoim"),
        "soja": ("soja", "lecitina de soja", "proteína de soja", "óleo de soja"),
        "leite": (
            "leite",
            "queijo",
            "iogurte",
            "manteiga",
            "creme de leite",
            "lactose",
            "mussarela",
            "parmesão",
        ),
        "frutos_casca": ("castanha", "noz", "amêndoa", "avelã", "pistache", "macadâmia"),
        "sulfitos": ("sulfito", "metabissulfito"),
    }
)

ALLERGEN_DISPLAY_NAMES = MappingProxyType(
    {
        "gluten": "GLÚTEN",
        "trigo": "TRIGO",
        "crustaceos": "CRUSTÁCEOS",
        "ovos": "OVOS",
        "peixes": "PEIXES",
        "amendoim": "AMENDOIM",
        "soja": "SOJA",
        "leite": "LEITE",
        "frutos_casca": "FRUTOS DE CASCA RIJA",
        "sulfitos": "SULFITOS",
    }
)

# ============================================================================
# Added-Sugar Estimation
# ============================================================================

# Ingredients that are added sugar in their entirety. Matched against the
# leading words of the ingredient name ("Açúcar, refinado", "Mel, de abelha").
PURE_SUGAR_KEYWORDS = (
    "açúcar",
    "mel",
    "melado",
    "rapadura",
    "xarope de glicose",
    "xarope de milho",
    "glucose de milho",
)

ESTIMATOR_API_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-flash-latest:generateContent"
)
ESTIMATOR_API_KEY_ENV = "GEMINI_API_KEY"
ESTIMATOR_TEMPERATURE = 0.1
ESTIMATOR_MAX_OUTPUT_TOKENS = 50

# Timeouts (seconds)
API_CONNECT_TIMEOUT = 3.05
API_READ_TIMEOUT = 20.0

# Retry configuration
API_MAX_RETRY_ATTEMPTS = 3
API_RETRY_BACKOFF_FACTOR = 1.0
API_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)

# Cached answers expire after 15 minutes
ESTIMATE_CACHE_TTL = 900

# ============================================================================
# Food Table (TACO, 4th edition CSV export)
# ============================================================================

TACO_SEARCH_LIMIT = 20

TACO_COLUMNS = MappingProxyType(
    {
        "number": "Número do Alimento",
        "category": "Categoria do alimento",
        "description": "Descrição dos alimentos",
        "energy_kcal": "Energia..kcal.",
        "proteins": "Proteína..g.",
        "total_fat": "Lipídeos..g.",
        "carbohydrates": "Carboidrato..g.",
        "fiber": "Fibra.Alimentar..g.",
        "sodium": "Sódio..mg.",
    }
)

TACO_FATTY_ACID_COLUMNS = MappingProxyType(
    {
        "saturated_fat": "Saturados..g.",
        "trans_18_1": "X18.1t..g.",
        "trans_18_2": "X18.2t..g.",
    }
)

# ============================================================================
# File Paths
# ============================================================================

SAVES_DIRECTORY = "saves"

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "RotulagemBR"
APP_VERSION = "0.3.0"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
