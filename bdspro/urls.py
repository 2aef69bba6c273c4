import logging

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse({'status': 'error', 'error': str(e)}, status=503)
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz', healthz, name='healthz'),
    path('api/', include('users.urls')),
    path('api/', include('wallet.urls')),
    path('api/', include('referrals.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
