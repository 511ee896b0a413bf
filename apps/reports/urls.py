from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Current business day window and countdown
    path('business-day/', views.business_day, name='business-day'),

    # Owner dashboards
    path('today/', views.today, name='today'),
    path('summary/', views.summary, name='summary'),
]
