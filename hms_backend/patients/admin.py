from django.contrib import admin

from .models import MedicalRecord, Patient


class MedicalRecordInline(admin.TabularInline):
    model = MedicalRecord
    extra = 0
    fields = ('visit_date', 'doctor_name', 'diagnosis', 'prescription')
    readonly_fields = ('visit_date',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'age', 'gender', 'phone', 'created_at')
    search_fields = ('full_name', 'phone')
    list_filter = ('gender',)
    ordering = ('id',)
    inlines = [MedicalRecordInline]


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor_name', 'diagnosis', 'visit_date')
    search_fields = ('patient__full_name', 'doctor_name', 'diagnosis')
    list_select_related = ('patient',)
    ordering = ('-visit_date', '-id')
