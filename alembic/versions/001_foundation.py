"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Definir tablas e índices que usan los repositorios PostgreSQL.
  - Backstop de "un solo timer corriendo por usuario": índice único
    parcial sobre time_entries(user_id) WHERE is_running.

Collaborators:
  - PostgreSQL 14+
  - infrastructure/repositories/postgres/* (columnas == campos de dominio)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - Sin FKs entre recursos (project_id, task_id, client_id, tag_ids):
    un delete no cascadea y las referencias colgantes son aceptadas.
    Sí hay FK user_id -> users (el dueño siempre existe).
  - Convención de nombres:
      pk_<tabla>, uq_<tabla>_<col>, ix_<tabla>_<col>,
      fk_<tabla>_<col>__<ref_tabla>
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _create_owned_table(name: str, *columns: sa.Column) -> None:
    """Tabla con dueño: id + user_id (FK users) + columnas + timestamps."""
    op.create_table(
        name,
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        *columns,
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=f"pk_{name}"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name=f"fk_{name}_user_id__users"
        ),
    )
    # R: listados scopeados por dueño, más reciente primero.
    op.create_index(f"ix_{name}_user_id_created_at", name, ["user_id", "created_at"])


def upgrade() -> None:
    """
    Orden:
      1) Identity (users)
      2) Catálogo (clients, projects, tasks, tags, timer_presets)
      3) Time entries
    """

    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "preferred_language",
            sa.String(5),
            nullable=False,
            server_default=sa.text("'en'"),
        ),
        sa.Column(
            "theme", sa.String(10), nullable=False, server_default=sa.text("'light'")
        ),
        sa.Column(
            "default_timer_preset_id", postgresql.UUID(as_uuid=True), nullable=True
        ),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("picture", sa.Text, nullable=True),
        sa.Column(
            "email_verified",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        # Verificación pendiente (token + expiración) y cooldown.
        sa.Column("verification_token", sa.Text, nullable=True),
        sa.Column(
            "verification_expires_at", sa.DateTime(timezone=True), nullable=True
        ),
        sa.Column(
            "last_verification_request", sa.DateTime(timezone=True), nullable=True
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("google_id", name="uq_users_google_id"),
    )

    # Email único case-insensitive (get_by_email usa lower(email)).
    op.execute("CREATE UNIQUE INDEX uq_users_lower_email ON users (lower(email))")

    # =========================================================
    # 2) CATÁLOGO
    # =========================================================
    _create_owned_table(
        "clients",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "contact_info", sa.Text, nullable=False, server_default=sa.text("''")
        ),
        sa.Column(
            "color", sa.String(7), nullable=False, server_default=sa.text("'#e74c3c'")
        ),
    )

    _create_owned_table(
        "projects",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "description", sa.Text, nullable=False, server_default=sa.text("''")
        ),
        sa.Column(
            "color", sa.String(7), nullable=False, server_default=sa.text("'#3498db'")
        ),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'active'"),
        ),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('active', 'archived')", name="ck_projects_status"
        ),
    )
    op.create_index("ix_projects_client_id", "projects", ["client_id"])
    # Provisioning busca el proyecto por defecto por (user_id, name).
    op.create_index("ix_projects_user_id_name", "projects", ["user_id", "name"])

    _create_owned_table(
        "tasks",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "description", sa.Text, nullable=False, server_default=sa.text("''")
        ),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'in-progress', 'completed')",
            name="ck_tasks_status",
        ),
    )
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])

    _create_owned_table(
        "tags",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column(
            "color", sa.String(7), nullable=False, server_default=sa.text("'#2ecc71'")
        ),
    )

    _create_owned_table(
        "timer_presets",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("work_duration", sa.Integer, nullable=False),
        sa.Column("break_duration", sa.Integer, nullable=False),
        sa.Column(
            "repetitions", sa.Integer, nullable=False, server_default=sa.text("1")
        ),
        sa.CheckConstraint(
            "work_duration >= 1 AND break_duration >= 1 AND repetitions >= 1",
            name="ck_timer_presets_positive",
        ),
    )
    op.create_index("ix_timer_presets_user_id_name", "timer_presets", ["user_id", "name"])

    # =========================================================
    # 3) TIME ENTRIES
    # =========================================================
    _create_owned_table(
        "time_entries",
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("task_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "tag_ids",
            postgresql.ARRAY(postgresql.UUID(as_uuid=True)),
            nullable=False,
            server_default=sa.text("ARRAY[]::uuid[]"),
        ),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        # Milisegundos.
        sa.Column("duration", sa.BigInteger, nullable=False, server_default=sa.text("0")),
        sa.Column("notes", sa.Text, nullable=False, server_default=sa.text("''")),
        sa.Column(
            "is_running", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
    )
    op.create_index("ix_time_entries_project_id", "time_entries", ["project_id"])
    op.create_index("ix_time_entries_task_id", "time_entries", ["task_id"])
    op.create_index(
        "ix_time_entries_user_id_start_time", "time_entries", ["user_id", "start_time"]
    )

    # A lo sumo UNA entrada corriendo por usuario (entre procesos).
    op.execute(
        "CREATE UNIQUE INDEX uq_time_entries_running_user "
        "ON time_entries (user_id) WHERE is_running"
    )


def downgrade() -> None:
    """Downgrade NO soportado para la migración fundacional."""
    raise NotImplementedError(
        "Baseline: downgrade no soportado. Para resetear, recrear la base de datos."
    )
