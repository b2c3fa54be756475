"""
NAMASTE code search endpoints.

``GET /api/codes/search`` filters the curated NAMASTE to ICD-11
mappings by free text and category; ``GET /api/codes/<code>`` looks up
a single NAMASTE code.  Both are read-only and open to anonymous
callers.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.exceptions import InvalidPayload, NotFoundError
from core.serializers.codes import CodeSearchQuerySerializer
from core.services.catalog import get_mapping_for_code, search_mappings


@api_view(['GET'])
@permission_classes([AllowAny])
def search_codes(request):
    q = CodeSearchQuerySerializer(data=request.query_params)
    if not q.is_valid():
        raise InvalidPayload('Invalid search query', details=q.errors)
    vd = q.validated_data
    results = search_mappings(q=vd.get('q') or None, category=vd.get('category'), limit=vd['limit'])
    return Response({'results': results, 'total': len(results)})


@api_view(['GET'])
@permission_classes([AllowAny])
def code_detail(request, code: str):
    result = get_mapping_for_code(code)
    if result is None:
        raise NotFoundError('Code not found')
    return Response(result)
