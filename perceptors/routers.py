"""
URL mappings for the perceptor maintenance API.

Trailing slashes are omitted on every path.  Identifiers travel as
``<category>/<code>`` path segments.
"""
from django.urls import path, include

from .auth_views import login_view
from .views import health
from .views.catalogs import catalogs_refresh
from .views.hospitals import (
    hospital_deactivate,
    hospital_edit,
    hospital_edit_validation,
    hospital_history,
    hospital_list_form,
    hospital_new,
    hospital_new_validation,
    hospital_reactivate,
    hospital_search,
    hospital_search_validation,
    hospital_seize,
)


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/catalogs/refresh', catalogs_refresh),
    path('api/hospitals', hospital_list_form, name='hospital_list_form'),
    path('api/hospitals/search/validation', hospital_search_validation),
    path('api/hospitals/search', hospital_search),
    path('api/hospitals/new/validation', hospital_new_validation),
    path('api/hospitals/new', hospital_new),
    path('api/hospitals/<str:category>/<int:code>/edit/validation', hospital_edit_validation),
    path('api/hospitals/<str:category>/<int:code>/edit', hospital_edit),
    path('api/hospitals/<str:category>/<int:code>/deactivate', hospital_deactivate),
    path('api/hospitals/<str:category>/<int:code>/seize', hospital_seize),
    path('api/hospitals/<str:category>/<int:code>/reactivate', hospital_reactivate),
    path('api/hospitals/<str:category>/<int:code>/history', hospital_history),
]
