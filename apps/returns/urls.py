from django.urls import path
from . import views

app_name = 'returns'

urlpatterns = [
    path('', views.ReturnCreateView.as_view(), name='create'),
    path('availability/', views.ReturnAvailabilityView.as_view(), name='availability'),
    path('mine/', views.MyReturnsView.as_view(), name='mine'),
]
