"""
Versioned SQL migrations for the Stockbook database.

Migration files are named ``v<NNN>_<name>.sql`` and applied in version
order. Each file runs inside one transaction together with its
``schema_migrations`` row, so a broken file leaves no partial schema
behind. An existing database is copied aside before migrating and
restored if the run raises.

Applied files must not change: a checksum mismatch aborts the run, since
the ledger's invariants (CHECK constraints, the append-only trigger, the
case-insensitive SKU index) live in these files.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockbook.config import get_logger, get_settings
from stockbook.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"^v(\d+)_(.+)\.sql$")

MIGRATIONS_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT,
    applied_at TEXT DEFAULT (datetime('now')),
    execution_time_ms INTEGER
)
"""

# Schema objects the stores rely on, as (type, name) pairs in sqlite_master
LEDGER_SCHEMA = (
    ("table", "materials"),
    ("table", "stock_movements"),
    ("index", "idx_materials_sku"),
    ("index", "idx_movements_material"),
    ("trigger", "trg_stock_movements_append_only"),
)


@dataclass(frozen=True)
class MigrationInfo:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``migrations_dir``, lowest version first."""
    found = []
    for path in migrations_dir.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, key=int) if applied else None


async def verify_ledger_schema(conn: aiosqlite.Connection) -> list[str]:
    """Return the ``type:name`` of every required schema object that is missing."""
    cursor = await conn.execute("SELECT type, name FROM sqlite_master")
    present = {(row[0], row[1]) for row in await cursor.fetchall()}
    return [f"{kind}:{name}" for kind, name in LEDGER_SCHEMA if (kind, name) not in present]


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration file and record it, atomically."""
    started = time.perf_counter()
    script = migration.path.read_text(encoding="utf-8")

    try:
        await conn.executescript(f"BEGIN;\n{script}\n")
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        if violations:
            raise aiosqlite.IntegrityError(
                f"{len(violations)} foreign key violation(s) after migration"
            )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file next to itself with a timestamped suffix."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def _migrate(
    conn: aiosqlite.Connection, migrations: list[MigrationInfo]
) -> list[MigrationResult]:
    await conn.execute(MIGRATIONS_TABLE)
    await conn.commit()
    applied = await get_applied_migrations(conn)

    results: list[MigrationResult] = []
    for migration in migrations:
        recorded = applied.get(migration.version)
        if recorded is not None:
            if recorded != migration.checksum:
                raise DatabaseError(
                    "migrate",
                    f"v{migration.version} {migration.name} was modified after being applied",
                )
            continue

        result = await apply_migration(conn, migration)
        results.append(result)
        if not result.success:
            break
    return results


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Bring the database up to the latest schema version.

    Args:
        db_path: Database file (default from StorageSettings).
        create_backup_before: Copy an existing database aside first.
        migrations_dir: Directory holding the ``v*.sql`` files.

    Returns:
        Results of the migrations attempted in this run. Already-applied
        versions are skipped; the run stops at the first failure.

    Raises:
        DatabaseError: An applied migration changed, or the bundled
            migrations ran but the ledger schema is incomplete.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    migrations = discover_migrations(migrations_dir)
    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None

    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            results = await _migrate(conn, migrations)

            if migrations_dir == MIGRATIONS_DIR and all(r.success for r in results):
                missing = await verify_ledger_schema(conn)
                if missing:
                    raise DatabaseError("migrate", f"missing schema objects: {', '.join(missing)}")
    except Exception as e:
        logger.error("database_initialization_failed", db_path=str(db_path), error=str(e))
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()

    logger.info(
        "database_initialized",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions, without changing the database."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied, key=int) if applied else None,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }
