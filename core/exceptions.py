"""
Core — Exception Handling

Domain exceptions raised by the service layer and the DRF exception
handler that renders every failure in the JSON error envelope.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('despensa')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InsufficientStockError(BusinessRuleViolation):
    """Requested reduction exceeds the quantity available at the branch."""
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'

    def __init__(self, detail=None, *, producto_id=None, disponible=None, solicitado=None):
        self.producto_id = producto_id
        self.disponible = disponible
        self.solicitado = solicitado
        if detail is None and producto_id is not None:
            detail = (
                f'Insufficient stock for product {producto_id}: '
                f'available={disponible}, requested={solicitado}.'
            )
        super().__init__(detail=detail)

    @property
    def context(self) -> dict:
        return {
            'producto_id': str(self.producto_id) if self.producto_id else None,
            'disponible': str(self.disponible) if self.disponible is not None else None,
            'solicitado': str(self.solicitado) if self.solicitado is not None else None,
        }


class AlreadyProcessedError(BusinessRuleViolation):
    """The document already went through the requested one-time transition."""
    default_detail = 'This document has already been processed.'
    default_code = 'ALREADY_PROCESSED'


class InvalidStateError(BusinessRuleViolation):
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'INVALID_STATE'


class NoBranchError(BusinessRuleViolation):
    default_detail = 'No branch could be resolved for this operation.'
    default_code = 'NO_BRANCH'


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'NOT_FOUND'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def _first_message(errors) -> str:
    if isinstance(errors, dict):
        if 'detail' in errors:
            return _first_message(errors['detail'])
        for field, value in errors.items():
            return f'{field}: {_first_message(value)}'
        return ''
    if isinstance(errors, (list, tuple)):
        return _first_message(errors[0]) if errors else ''
    return str(errors)


def _envelope(errors, code: str) -> dict:
    return {
        'success': False,
        'message': _first_message(errors),
        'error': code,
        'errors': errors,
    }


def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "message": "...", "error": "CODE", "errors": {...} }
    """
    if isinstance(exc, Http404):
        exc = NotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'error_dict') else {'detail': exc.messages}
        return Response(_envelope(errors, 'VALIDATION_ERROR'), status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {
                'success': False,
                'message': str(exc) or 'Internal server error.',
                'error': 'INTERNAL_ERROR',
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        code = 'VALIDATION_ERROR'
    else:
        codes = exc.get_codes() if isinstance(exc, APIException) else None
        code = codes if isinstance(codes, str) else getattr(exc, 'default_code', 'error')
        code = str(code).upper()

    if isinstance(response.data, dict):
        errors = response.data
    elif isinstance(response.data, list):
        errors = {'detail': response.data}
    else:
        errors = {'detail': [str(response.data)]}

    data = _envelope(errors, code)
    extra = getattr(exc, 'context', None)
    if extra:
        data['data'] = extra
    response.data = data
    return response
