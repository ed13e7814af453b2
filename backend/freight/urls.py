from django.urls import path
from . import views

app_name = 'freight'

urlpatterns = [
    # Customer APIs
    path('customer/package-presets/', views.list_package_presets, name='package-presets'),
    path('customer/requests/', views.create_transport_request, name='create-request'),
    path('customer/requests/<int:request_id>/quote/', views.get_quote, name='quote'),
    path('customer/requests/<int:request_id>/quote/accept/', views.accept_quote_view, name='accept-quote'),
    path('customer/requests/<int:request_id>/quote/decline/', views.decline_quote_view, name='decline-quote'),
    path('customer/requests/<int:request_id>/offers/', views.list_offers, name='offers'),
    path('customer/requests/<int:request_id>/offers/<int:offer_id>/accept/', views.accept_offer_view, name='accept-offer'),
    path('customer/requests/<int:request_id>/offers/<int:offer_id>/reject/', views.reject_offer_view, name='reject-offer'),

    # Dispatcher APIs
    path('dispatch/requests/<int:request_id>/price/', views.price_transport_request, name='price-request'),
    path('dispatch/requests/<int:request_id>/run-matching/', views.run_matching, name='run-matching'),

    # Public carrier offer link
    path('offers/<uuid:token>/', views.offer_detail, name='offer-detail'),
    path('offers/<uuid:token>/submit/', views.submit_offer_view, name='submit-offer'),
]
