from django.contrib import admin

from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'appointment_date', 'appointment_time', 'patient', 'reason')
    list_filter = ('appointment_date',)
    search_fields = ('patient__full_name', 'reason')
    list_select_related = ('patient',)
    ordering = ('appointment_date', 'appointment_time', 'id')
    date_hierarchy = 'appointment_date'
