from django.contrib import admin

from .models import Gig, GigFaq, Order, PricePlan, RevisionNote, Review


class PricePlanInline(admin.TabularInline):
    model = PricePlan
    extra = 0
    fields = ("tier", "price", "delivery_time", "revisions", "position")


class GigFaqInline(admin.TabularInline):
    model = GigFaq
    extra = 0
    fields = ("question", "answer", "position")


@admin.register(Gig)
class GigAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "category", "created_at")
    list_filter = ("category", "created_at")
    search_fields = ("title", "description", "owner__email")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [PricePlanInline, GigFaqInline]


class RevisionNoteInline(admin.TabularInline):
    model = RevisionNote
    extra = 0
    fields = ("note", "requested_by", "requested_at")
    readonly_fields = ("requested_at",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "gig_title", "plan_tier", "buyer", "seller", "status", "amount", "created_at")
    list_filter = ("status", "plan_tier", "created_at")
    search_fields = ("id", "gig_title", "buyer__email", "seller__email")
    # Lifecycle fields change only through the order service
    readonly_fields = (
        "id",
        "status",
        "revisions_left",
        "delivery_files",
        "created_at",
        "updated_at",
        "started_at",
        "delivered_at",
        "completed_at",
        "cancelled_at",
    )
    inlines = [RevisionNoteInline]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("order", "reviewer", "reviewed_user", "rating", "category", "is_public", "created_at")
    list_filter = ("rating", "category", "is_public")
    search_fields = ("comment", "reviewer__email", "reviewed_user__email")
    readonly_fields = ("id", "created_at", "updated_at")
