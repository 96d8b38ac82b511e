from django.urls import path
from .views import user_design_list_create, user_design_detail

urlpatterns = [
    path('user-designs/', user_design_list_create, name='user-design-list-create'),
    path('user-designs/<str:pk>/', user_design_detail, name='user-design-detail'),
]
