"""
Core — Constants

Shared literals: pagination limits, audit actions, stock movement reasons
and reference types.

@file core/constants.py
"""

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200

# Audit actions (mirror AuditLog.ActionChoices)
AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_DELETE = 'DELETE'
AUDIT_ACTION_SOFT_DELETE = 'SOFT_DELETE'
AUDIT_ACTION_STATUS_CHANGE = 'STATUS_CHANGE'
AUDIT_ACTION_LOGIN = 'LOGIN'
AUDIT_ACTION_LOGOUT = 'LOGOUT'

# Branch selection header (X-Sucursal-Id)
SUCURSAL_HEADER = 'HTTP_X_SUCURSAL_ID'


# Stock movement reasons
MOTIVO_RECEPCION_COMPRA = 'Recepción de compra'
MOTIVO_VENTA = 'Venta'
MOTIVO_EDICION_VENTA = 'Edición de venta'
MOTIVO_CANCELACION_VENTA = 'Cancelación de venta'
MOTIVO_DEVOLUCION_VENTA = 'Devolución de venta'
MOTIVO_DEVOLUCION_PARCIAL = 'Devolución parcial'
MOTIVO_ELIMINACION_VENTA = 'Eliminación de venta'
MOTIVO_TRANSFERENCIA = 'Transferencia entre sucursales'

# Stock movement reference types
REFERENCIA_COMPRA = 'compra'
REFERENCIA_VENTA = 'venta'
REFERENCIA_AJUSTE = 'ajuste'
REFERENCIA_TRANSFERENCIA = 'transferencia'

# Document number sequences
SECUENCIA_VENTA = ('venta', 'V')
SECUENCIA_COMPRA = ('compra', 'COMP')

# Display placeholders for references that no longer resolve
CLIENTE_GENERAL = 'Cliente General'
CLIENTE_NO_ENCONTRADO = 'Cliente no encontrado'
PROVEEDOR_NO_ENCONTRADO = 'Proveedor no encontrado'
PRODUCTO_NO_ENCONTRADO = 'Producto no encontrado'
