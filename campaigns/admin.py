from django.contrib import admin
from django.db.models import Count, Q
from django.utils.html import format_html

from .models import Campaign, CampaignMember
from .roles import RoleLevel


class CampaignMemberInline(admin.TabularInline):
    """Inline admin for campaign members."""

    model = CampaignMember
    extra = 0
    fields = ["user", "role", "is_admin", "permissions", "created_at"]
    readonly_fields = ["created_at"]
    raw_id_fields = ["user"]

    def get_queryset(self, request):
        """Optimize inline queryset."""
        return super().get_queryset(request).select_related("user")


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    """Admin configuration for Campaign model."""

    list_display = ["name", "owner", "is_active", "created_at", "member_count_display"]
    list_filter = ["is_active", "created_at"]
    search_fields = ["name", "slug", "description", "owner__username", "owner__email"]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "created_at"
    raw_id_fields = ["owner"]
    inlines = [CampaignMemberInline]

    fieldsets = [
        (
            "Basic Information",
            {"fields": ["name", "slug", "description"]},
        ),
        (
            "Ownership",
            {
                "fields": ["owner"],
                "description": "The campaign owner holds every permission and "
                "cannot be removed. Changing the owner deletes any membership "
                "row the new owner had.",
            },
        ),
        (
            "Status",
            {"fields": ["is_active"]},
        ),
        (
            "Timestamps",
            {"fields": ["created_at", "updated_at"], "classes": ["collapse"]},
        ),
    ]

    def get_queryset(self, request):
        """Annotate member counts per role."""
        return (
            super()
            .get_queryset(request)
            .select_related("owner")
            .annotate(
                total_members=Count("members") + 1,  # +1 for owner
                admin_count=Count("members", filter=Q(members__role=RoleLevel.ADMIN)),
                member_count=Count("members", filter=Q(members__role=RoleLevel.MEMBER)),
                viewer_count=Count("members", filter=Q(members__role=RoleLevel.VIEWER)),
            )
        )

    @admin.display(description="Member Count", ordering="total_members")
    def member_count_display(self, obj):
        """Display member count breakdown by role."""
        return format_html(
            "<strong>Admin:</strong> {} | <strong>Member:</strong> {} | "
            "<strong>Viewer:</strong> {} | <strong>Total:</strong> {}",
            getattr(obj, "admin_count", 0),
            getattr(obj, "member_count", 0),
            getattr(obj, "viewer_count", 0),
            getattr(obj, "total_members", 1),
        )


@admin.register(CampaignMember)
class CampaignMemberAdmin(admin.ModelAdmin):
    """Admin configuration for CampaignMember model."""

    list_display = ["user", "campaign", "role", "is_admin", "created_at"]
    list_filter = ["role", "is_admin", "created_at"]
    search_fields = [
        "user__username",
        "user__email",
        "campaign__name",
        "campaign__owner__username",
    ]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "created_at"
    raw_id_fields = ["user", "campaign"]

    fieldsets = [
        (
            "Membership",
            {
                "fields": ["campaign", "user", "role", "is_admin"],
                "description": "Users can have one membership per campaign. Campaign "
                "owners are handled automatically and cannot have membership rows.",
            },
        ),
        (
            "Permission Overrides",
            {
                "fields": ["permissions"],
                "description": 'Explicit grants or denies, e.g. {"DELETE_ENTITIES": '
                "true}. Permissions not listed fall back to the role default.",
            },
        ),
        (
            "Timestamps",
            {"fields": ["created_at", "updated_at"]},
        ),
    ]

    def get_queryset(self, request):
        """Optimize queryset with select_related."""
        return (
            super()
            .get_queryset(request)
            .select_related("user", "campaign", "campaign__owner")
        )
