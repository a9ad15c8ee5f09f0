"""
Profile of the authenticated user.
"""
from __future__ import annotations

import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..exceptions import ValidationError
from ..models import User
from ..serializers.auth import ProfileUpdateSerializer
from ..services.payloads import check_upload, user_data

logger = logging.getLogger(__name__)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def me(request):
    """Read or partially update the caller's profile.

    ``PUT`` accepts ``username``, ``email``, ``phone_number`` and an
    ``image`` file; the role cannot be changed here.
    """
    user: User = request.user  # type: ignore[assignment]
    if request.method == 'GET':
        return Response({'success': True, 'user': user_data(user)})

    s = ProfileUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    fields = dict(s.validated_data)
    image = request.FILES.get('image')
    if not fields and image is None:
        raise ValidationError('No fields to update')

    username = fields.get('username')
    if username and User.objects.filter(username=username).exclude(pk=user.pk).exists():
        raise ValidationError('Username is already taken.')
    for field, value in fields.items():
        setattr(user, field, value)
    if image is not None:
        check_upload(image)
        user.image = image
        fields['image'] = image
    user.save(update_fields=list(fields))
    logger.info('User %s updated profile fields %s', user.pk, sorted(fields))
    return Response({'success': True, 'user': user_data(user)})
