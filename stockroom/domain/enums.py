# stockroom/domain/enums.py
import enum


class UserRole(str, enum.Enum):
    admin = "admin"
    manager = "manager"
    operator = "operator"
    viewer = "viewer"


class ProductType(str, enum.Enum):
    totem = "totem"
    tablet = "tablet"
    insumo = "insumo"
    peca_acrilico = "peca_acrilico"
    wobbler = "wobbler"
    totem_eliptico = "totem_eliptico"
    adesivo = "adesivo"
    placa = "placa"
    material_corte = "material_corte"


class ProductStatus(str, enum.Enum):
    novo = "novo"
    usado = "usado"
    rb = "rb"
    ativo = "ativo"
    manutencao = "manutencao"
    descartado = "descartado"


class MovementType(str, enum.Enum):
    entrada = "entrada"
    saida = "saida"
    transferencia = "transferencia"
    venda = "venda"
    locacao = "locacao"
    devolucao = "devolucao"
    perda = "perda"


# Movements that take stock out of a location and need it on hand first.
OUTBOUND_MOVEMENT_TYPES = frozenset({MovementType.saida, MovementType.venda, MovementType.perda})


class MovementReference(str, enum.Enum):
    sale = "sale"
    rental = "rental"


class SupplierCategory(str, enum.Enum):
    fabricante = "fabricante"
    distribuidor = "distribuidor"
    servico = "servico"
    outro = "outro"


class CustomerType(str, enum.Enum):
    individual = "individual"
    company = "company"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    partial = "partial"
    cancelled = "cancelled"


class RentalStatus(str, enum.Enum):
    active = "active"
    returned = "returned"
    overdue = "overdue"
    cancelled = "cancelled"


# Rentals that can still receive returned items.
OPEN_RENTAL_STATUSES = frozenset({RentalStatus.active, RentalStatus.overdue})


class ResourceType(str, enum.Enum):
    product = "product"
    inventory = "inventory"
    sale = "sale"
    rental = "rental"
