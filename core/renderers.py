"""
Core — Response Renderer

Wraps successful responses in the envelope the POS client expects:
  { "success": true, "data": ..., "meta": ... }

@file core/renderers.py
"""

from rest_framework import status
from rest_framework.renderers import JSONRenderer


def _pagination_meta(data: dict) -> dict:
    return {
        'count': data.get('count'),
        'next': data.get('next'),
        'previous': data.get('previous'),
    }


class StandardJSONRenderer(JSONRenderer):
    """Success envelope; error bodies are already shaped by the exception handler."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        if response is not None:
            if response.status_code == status.HTTP_204_NO_CONTENT:
                return b''
            if response.status_code >= 400:
                return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'success' in data:
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'results' in data and 'count' in data:
            envelope = {
                'success': True,
                'data': data['results'],
                'meta': _pagination_meta(data),
            }
        else:
            envelope = {'success': True, 'data': data}

        return super().render(envelope, accepted_media_type, renderer_context)
