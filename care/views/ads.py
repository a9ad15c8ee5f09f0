"""
Advertisement banners.

Anyone may read the active banners and the full list; only
administrators upload, toggle or delete them.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..authentication import BearerAuthentication
from ..permissions import IsAdminRole
from ..serializers.directory import AdvertisementSerializer
from ..services import directory


class _ListOrAdminCreate(IsAdminRole):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method == 'GET' or super().has_permission(request, view)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def active_ads(request):
    return Response({'success': True, 'ads': directory.list_advertisements(active_only=True)})


@api_view(['GET', 'POST'])
@authentication_classes([BearerAuthentication])
@permission_classes([_ListOrAdminCreate])
def admin_ads(request):
    if request.method == 'GET':
        return Response({'success': True, 'ads': directory.list_advertisements()})

    s = AdvertisementSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ad = directory.create_advertisement(s.validated_data, image=request.FILES.get('image'))
    return Response({'success': True, 'message': 'Advertisement created successfully', 'ad_id': ad.pk},
                    status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def toggle_ad(request, ad_id: int):
    new_status = directory.toggle_advertisement(ad_id)
    return Response({'success': True, 'message': 'Advertisement status updated', 'new_status': new_status})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_ad(request, ad_id: int):
    directory.delete_advertisement(ad_id)
    return Response({'success': True, 'message': 'Advertisement deleted successfully'})
