"""
Users — Django Admin Configuration

Operator accounts with role badges; soft-deleted users hidden by default.

@file users/admin.py
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User

ROL_COLORS = {
    'admin': '#dc2626',
    'gerente': '#3b82f6',
    'vendedor': '#22c55e',
}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'get_full_name', 'rol_badge', 'sucursal', 'is_active', 'date_joined')
    list_filter = ('rol', 'is_active', 'is_staff', 'is_deleted', 'sucursal')
    search_fields = ('email', 'nombre', 'apellido')
    readonly_fields = (
        'id', 'created_at', 'updated_at', 'created_by', 'updated_by',
        'date_joined', 'last_login',
    )
    list_select_related = ('sucursal',)
    show_full_result_count = False
    list_per_page = 30
    ordering = ('-created_at',)
    raw_id_fields = ('sucursal',)

    fieldsets = (
        (None, {'fields': ('id', 'email', 'password')}),
        (_('Personal info'), {'fields': ('nombre', 'apellido', 'telefono')}),
        (_('Store'), {'fields': ('rol', 'sucursal')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Audit'), {
            'fields': ('date_joined', 'last_login', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'nombre', 'apellido', 'rol', 'sucursal', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if not request.GET.get('is_deleted__exact'):
            qs = qs.filter(is_deleted=False)
        return qs

    @admin.display(description=_('Role'))
    def rol_badge(self, obj):
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            ROL_COLORS.get(obj.rol, '#6b7280'), obj.get_rol_display(),
        )
