"""
Demo catalog for local development.

Materials are registered through the registry and their history is
replayed through the stock ledger oldest-first, so every seeded balance
is the sum of its movements.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from stockbook.config import get_logger
from stockbook.core.entities.movement import MovementReason, MovementType, StockMovement
from stockbook.core.services import MaterialRegistryService, StockLedgerService

logger = get_logger(__name__)

IN = MovementType.INWARD
OUT = MovementType.OUTWARD
PURCHASE = MovementReason.PURCHASE.value
SALES = MovementReason.SALES.value
DAMAGE = MovementReason.DAMAGE.value


@dataclass(frozen=True)
class SeedMovement:
    days_ago: int
    movement_type: MovementType
    quantity: int
    reason: str
    reference: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class SeedMaterial:
    sku: str
    name: str
    category: str
    supplier: str
    unit_price: float
    reorder_level: int
    history: tuple[SeedMovement, ...] = ()


CATALOG: tuple[SeedMaterial, ...] = (
    # Tiles
    SeedMaterial(
        "TILE-001", "Ceramic Floor Tile 60x60", "Tiles", "Supreme Ceramics", 450, 50,
        (
            SeedMovement(15, IN, 200, PURCHASE, "PO-2025-001", "Initial stock purchase"),
            SeedMovement(10, OUT, 50, SALES, "INV-2025-001", "Customer: Retail walk-in"),
            SeedMovement(8, OUT, 5, DAMAGE, notes="Damaged during handling"),
            SeedMovement(2, OUT, 30, SALES, "INV-2025-015"),
            SeedMovement(1, IN, 35, PURCHASE, "PO-2025-012"),
        ),
    ),
    SeedMaterial(
        "TILE-002", "Porcelain Wall Tile 30x60", "Tiles", "Nitco Ltd", 380, 75,
        (
            SeedMovement(20, IN, 250, PURCHASE, "PO-2025-002"),
            SeedMovement(12, OUT, 50, SALES, "INV-2025-002"),
        ),
    ),
    SeedMaterial(
        "TILE-003", "Vitrified Tile Premium Glossy Finish", "Tiles", "Kajaria Ceramics", 520, 30,
        (
            SeedMovement(30, IN, 50, PURCHASE, "PO-2025-003"),
            SeedMovement(5, OUT, 45, SALES, "INV-2025-008"),
        ),
    ),
    SeedMaterial(
        "TILE-004", "Mosaic Tile Pattern Blue & White Designer Collection", "Tiles",
        "Somany Ceramics", 680, 20,
        (
            SeedMovement(25, IN, 30, PURCHASE, "PO-2025-004"),
            SeedMovement(10, OUT, 28, SALES, "INV-2025-010"),
            SeedMovement(8, OUT, 2, DAMAGE, notes="Damaged tiles during transport"),
        ),
    ),
    # Laminates
    SeedMaterial(
        "LAM-001", "Premium HPL Laminate Sheets", "Laminates", "Sunmica India", 850, 30,
        (
            SeedMovement(18, IN, 100, PURCHASE, "PO-2025-005"),
            SeedMovement(6, OUT, 20, SALES, "INV-2025-005"),
            SeedMovement(4, OUT, 2, DAMAGE),
        ),
    ),
    SeedMaterial(
        "LAM-002", "Eco-Friendly Laminate", "Laminates", "Formica Group", 920, 40,
        (
            SeedMovement(22, IN, 150, PURCHASE, "PO-2025-006"),
            SeedMovement(14, OUT, 30, SALES, "INV-2025-006"),
        ),
    ),
    SeedMaterial(
        "LAM-003", "Textured Wood Grain Laminate", "Laminates", "Merino Laminates", 780, 25,
        (
            SeedMovement(45, IN, 40, PURCHASE, "PO-2025-007"),
            SeedMovement(35, OUT, 40, SALES, "INV-2025-011"),
        ),
    ),
    # Lighting
    SeedMaterial(
        "LIGHT-001", "LED Panel Light 36W", "Lighting", "Philips India", 1200, 20,
        (
            SeedMovement(16, IN, 60, PURCHASE, "PO-2025-008"),
            SeedMovement(7, OUT, 15, SALES, "INV-2025-012"),
            SeedMovement(3, OUT, 1, DAMAGE, notes="Defective unit"),
        ),
    ),
    SeedMaterial(
        "LIGHT-002", "Fluorescent Tube 40W", "Lighting", "Osram Limited", 280, 40,
        (
            SeedMovement(60, IN, 50, PURCHASE, "PO-2025-009"),
            SeedMovement(50, OUT, 42, SALES, "INV-2025-013"),
        ),
    ),
    SeedMaterial(
        "LIGHT-003", "Smart LED Bulb WiFi Enabled RGB", "Lighting", "Syska LED", 850, 50,
        (
            SeedMovement(12, IN, 600, PURCHASE, "PO-2025-010", "Bulk order for new product launch"),
            SeedMovement(3, OUT, 100, SALES, "INV-2025-014"),
        ),
    ),
    # Sanitaryware
    SeedMaterial(
        "SANIT-001", "Ceramic Water Closet", "Sanitaryware", "Kohler India", 4500, 10,
        (
            SeedMovement(20, IN, 30, PURCHASE, "PO-2025-011"),
            SeedMovement(8, OUT, 5, SALES, "INV-2025-016"),
            SeedMovement(5, OUT, 1, DAMAGE, notes="Broken during installation demo"),
        ),
    ),
    SeedMaterial(
        "SANIT-002", "Wall-Mounted Wash Basin", "Sanitaryware", "Jaquar Group", 3200, 15,
        (SeedMovement(40, IN, 35, PURCHASE, "PO-2025-017", "Opening stock"),),
    ),
    SeedMaterial(
        "SANIT-003", "Premium Stainless Steel Kitchen Sink Double Bowl", "Sanitaryware",
        "Cera Sanitaryware", 5600, 8,
    ),
    # Paints
    SeedMaterial(
        "PAINT-001", "Premium Exterior Paint (20L)", "Paints", "Asian Paints", 2400, 25,
        (
            SeedMovement(14, IN, 80, PURCHASE, "PO-2025-013"),
            SeedMovement(9, OUT, 10, SALES, "INV-2025-017"),
            SeedMovement(6, OUT, 3, DAMAGE, notes="Leaked cans"),
            SeedMovement(2, OUT, 7, SALES, "INV-2025-018"),
        ),
    ),
    SeedMaterial(
        "PAINT-002", "Interior Emulsion (10L)", "Paints", "Berger Paints", 1400, 20,
        (
            SeedMovement(28, IN, 25, PURCHASE, "PO-2025-014"),
            SeedMovement(4, OUT, 22, SALES, "INV-2025-019"),
        ),
    ),
    SeedMaterial(
        "PAINT-003", "Waterproofing Sealant Coat", "Paints", "Dulux Paints", 1800, 30,
        (
            SeedMovement(40, IN, 96, PURCHASE, "PO-2025-018", "Opening stock"),
            SeedMovement(33, OUT, 1, DAMAGE, notes="Dented container"),
        ),
    ),
    # Hardware
    SeedMaterial(
        "HW-001", "Door Handle Brass Antique Finish", "Hardware", "Yale India", 450, 40,
        (
            SeedMovement(10, IN, 150, PURCHASE, "PO-2025-015"),
            SeedMovement(2, OUT, 30, SALES, "INV-2025-020"),
        ),
    ),
    SeedMaterial(
        "HW-002", "Door Lock Digital Smart Biometric", "Hardware", "Godrej Security", 8500, 5,
    ),
    SeedMaterial(
        "HW-003", "Window Hinge Stainless Steel 304 Grade Premium Quality", "Hardware",
        "Dorma India", 280, 50,
        (
            SeedMovement(40, IN, 60, PURCHASE, "PO-2025-016"),
            SeedMovement(20, OUT, 58, SALES, "INV-2025-021", "Popular item - need urgent reorder"),
        ),
    ),
    # Edge cases
    SeedMaterial(
        "SPEC-001",
        "Special Product with Very Long Name for Testing UI Display and Truncation "
        "Behavior in Tables",
        "Other", "Test Supplier", 1000, 10,
        (SeedMovement(35, IN, 15, PURCHASE, "PO-2025-019", "Opening stock"),),
    ),
    SeedMaterial("TEST-999", "Test Product Zero Stock", "Other", "Test Supplier", 100, 5),
)


@dataclass
class SeedResult:
    """Counts of what a seed run created."""

    materials: int = 0
    movements: int = 0
    categories: dict[str, int] = field(default_factory=dict)


async def seed_database(
    registry: MaterialRegistryService,
    ledger: StockLedgerService,
    catalog: tuple[SeedMaterial, ...] = CATALOG,
    clear_existing: bool = True,
    now: datetime | None = None,
) -> SeedResult:
    """
    Load the demo catalog.

    Args:
        registry: Registry used to create (and clear) materials.
        ledger: Ledger used to replay each material's history.
        catalog: Materials to load.
        clear_existing: Delete all materials (and their movements) first.
        now: Reference time that ``days_ago`` is counted back from.

    Returns:
        SeedResult with material, movement and per-category counts.
    """
    now = now or datetime.now(UTC)
    result = SeedResult()

    if clear_existing:
        existing = await registry.list_materials()
        for material in existing:
            await registry.delete_material(material.id)
        logger.info("seed_cleared", materials=len(existing))

    for item in catalog:
        material = await registry.create_material(
            sku=item.sku,
            name=item.name,
            category=item.category,
            supplier=item.supplier,
            unit_price=item.unit_price,
            reorder_level=item.reorder_level,
        )
        result.materials += 1
        result.categories[item.category] = result.categories.get(item.category, 0) + 1

        for entry in sorted(item.history, key=lambda e: e.days_ago, reverse=True):
            movement = StockMovement(
                material_id=material.id,
                movement_type=entry.movement_type,
                quantity=entry.quantity,
                reason=entry.reason,
                reference=entry.reference,
                notes=entry.notes,
                created_at=now - timedelta(days=entry.days_ago),
            )
            damaged = entry.quantity if entry.reason == DAMAGE else 0
            await ledger.apply(movement, damaged_delta=damaged)
            result.movements += 1

    logger.info(
        "seed_complete",
        materials=result.materials,
        movements=result.movements,
        categories=len(result.categories),
    )
    return result
