"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the SPM schema from scratch:
- productos: catalog with authoritative stock and optimistic-lock version
- ventas: one row per sold line (producto_id NULL for manual items)
- compras: stock intake records
- usuarios / sesiones: staff accounts and bearer sessions
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ============================================================================
    # productos
    # ============================================================================
    op.create_table(
        'productos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('codigo_barras', sa.String(length=64), nullable=True),
        sa.Column('nombre', sa.String(length=255), nullable=False),
        sa.Column('precio', sa.Numeric(12, 2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('stock >= 0', name='ck_productos_stock_non_negative'),
        sa.CheckConstraint('precio >= 0', name='ck_productos_precio_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('codigo_barras'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_productos_nombre', 'productos', ['nombre'])

    # ============================================================================
    # ventas
    # ============================================================================
    op.create_table(
        'ventas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('producto_id', sa.Integer(), nullable=True),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        sa.Column('precio_unitario', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(14, 2), nullable=False),
        sa.Column('metodo_pago', sa.String(length=32), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notas', sa.String(length=255), nullable=True),
        sa.CheckConstraint('cantidad > 0', name='ck_ventas_cantidad_positive'),
        sa.ForeignKeyConstraint(['producto_id'], ['productos.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_ventas_fecha', 'ventas', ['fecha'])
    op.create_index('ix_ventas_producto_id', 'ventas', ['producto_id'])

    # ============================================================================
    # compras
    # ============================================================================
    op.create_table(
        'compras',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('producto_id', sa.Integer(), nullable=False),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        sa.Column('costo_unitario', sa.Numeric(12, 2), nullable=False),
        sa.Column('total', sa.Numeric(14, 2), nullable=False),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('cantidad > 0', name='ck_compras_cantidad_positive'),
        sa.ForeignKeyConstraint(['producto_id'], ['productos.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_compras_fecha', 'compras', ['fecha'])
    op.create_index('ix_compras_producto_id', 'compras', ['producto_id'])

    # ============================================================================
    # usuarios
    # ============================================================================
    op.create_table(
        'usuarios',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('rol', sa.String(length=16), nullable=False),
        sa.Column('activo', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("rol IN ('jefe', 'almacen', 'cajero')", name='ck_usuarios_rol'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_usuarios_username', 'usuarios', ['username'], unique=True)

    # ============================================================================
    # sesiones
    # ============================================================================
    op.create_table(
        'sesiones',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revocada', sa.Boolean(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('revoked_reason', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['usuarios.id']),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_sesiones_user_id', 'sesiones', ['user_id'])
    op.create_index('ix_sesiones_token_hash', 'sesiones', ['token_hash'], unique=True)
    op.create_index('ix_sesiones_expires_at', 'sesiones', ['expires_at'])
    op.create_index('ix_sesiones_revocada', 'sesiones', ['revocada'])
    op.create_index('ix_sesiones_user_active', 'sesiones', ['user_id', 'revocada'])


def downgrade():
    op.drop_index('ix_sesiones_user_active', table_name='sesiones')
    op.drop_index('ix_sesiones_revocada', table_name='sesiones')
    op.drop_index('ix_sesiones_expires_at', table_name='sesiones')
    op.drop_index('ix_sesiones_token_hash', table_name='sesiones')
    op.drop_index('ix_sesiones_user_id', table_name='sesiones')
    op.drop_table('sesiones')

    op.drop_index('ix_usuarios_username', table_name='usuarios')
    op.drop_table('usuarios')

    op.drop_index('ix_compras_producto_id', table_name='compras')
    op.drop_index('ix_compras_fecha', table_name='compras')
    op.drop_table('compras')

    op.drop_index('ix_ventas_producto_id', table_name='ventas')
    op.drop_index('ix_ventas_fecha', table_name='ventas')
    op.drop_table('ventas')

    op.drop_index('ix_productos_nombre', table_name='productos')
    op.drop_table('productos')
