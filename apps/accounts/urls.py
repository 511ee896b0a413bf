from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('logout/', views.logout, name='logout'),

    # User profile
    path('user/', views.current_user, name='current-user'),

    # Shop (onboarding and profile)
    path('shop/', views.shop, name='shop'),

    # Staff management (owner only)
    path('staff/', views.staff_collection, name='staff'),
    path('staff/<uuid:staff_id>/kick/', views.kick, name='staff-kick'),
]
