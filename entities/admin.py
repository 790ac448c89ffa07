from django.contrib import admin

from .models import Character, Item, Location, Quest


class CampaignEntityAdmin(admin.ModelAdmin):
    """Shared admin configuration for campaign records."""

    list_display = ["name", "campaign", "created_by", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["name", "campaign__name", "created_by__username"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["campaign", "created_by"]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("campaign", "created_by")


admin.site.register(Character, CampaignEntityAdmin)
admin.site.register(Location, CampaignEntityAdmin)
admin.site.register(Item, CampaignEntityAdmin)
admin.site.register(Quest, CampaignEntityAdmin)
