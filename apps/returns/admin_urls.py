from django.urls import path
from . import views

app_name = 'returns_admin'

urlpatterns = [
    path('', views.AdminReturnListView.as_view(), name='list'),
    path('<int:pk>/', views.AdminReturnDetailView.as_view(), name='detail'),
    path('<int:pk>/credit-note/', views.AdminCreditNoteView.as_view(), name='credit-note'),
    path('<int:pk>/refund-preview/', views.AdminRefundPreviewView.as_view(), name='refund-preview'),
]
