"""
CatalogService - Gig CRUD & Browsing

Freelancers publish gigs with one to three price plans and optional FAQs.
Media (thumbnail, gallery images) goes through the storage abstraction and
only the returned URLs are kept on the gig.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.paginator import Paginator
from django.db import transaction

from infrastructure.storage import StorageException, StorageInterface
from marketplace.catalog.domain.models.gig import Gig, GigFaq, PricePlan
from marketplace.filters import GigFilter
from marketplace.infra.observability.metrics import gigs_created_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)

GIG_FIELDS = ["title", "description", "category", "keywords", "requirements"]


class CatalogService(BaseService):
    """
    Service for the gig catalog.

    Responsibilities:
    - Public browsing with filters and pagination
    - Gig details
    - Create / update / delete (owner only)
    - Gig media uploads via the storage abstraction
    """

    def __init__(self, storage: StorageInterface):
        super().__init__()
        self.storage = storage

    @BaseService.log_performance
    def list_gigs(
        self, filters: Optional[Dict[str, Any]] = None, page: int = 1, page_size: int = 20
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Browse gigs, newest first.

        Args:
            filters: Query params understood by ``GigFilter``
                (category, min_price, max_price, search, owner)

        Example:
            >>> result = catalog_service.list_gigs({"category": "design", "max_price": "50"})
            >>> result.value["results"]
        """
        base = Gig.objects.select_related("owner").prefetch_related("price_plans").order_by("-created_at", "-id")
        gig_filter = GigFilter(data=filters or {}, queryset=base)
        if not gig_filter.is_valid():
            return service_err(ErrorCodes.VALIDATION_ERROR, _first_error(gig_filter.errors))

        paginator = Paginator(gig_filter.qs, page_size)
        page_obj = paginator.get_page(page)

        self.logger.info(f"Listed gigs: count={paginator.count}, page={page_obj.number}/{paginator.num_pages}")
        return service_ok(
            {
                "results": list(page_obj.object_list),
                "count": paginator.count,
                "page": page_obj.number,
                "page_size": page_size,
                "num_pages": paginator.num_pages,
                "has_next": page_obj.has_next(),
                "has_previous": page_obj.has_previous(),
            }
        )

    @BaseService.log_performance
    def get_gig(self, gig_id) -> ServiceResult[Gig]:
        try:
            gig = Gig.objects.select_related("owner").prefetch_related("price_plans", "faqs").get(id=gig_id)
        except (Gig.DoesNotExist, DjangoValidationError, ValueError):
            return service_err(ErrorCodes.GIG_NOT_FOUND, f"Gig {gig_id} not found")
        return service_ok(gig)

    @BaseService.log_performance
    def list_my_gigs(self, user: User) -> ServiceResult[List[Gig]]:
        gigs = Gig.objects.filter(owner=user).prefetch_related("price_plans", "faqs").order_by("-created_at", "-id")
        return service_ok(list(gigs))

    @BaseService.log_performance
    def create_gig(
        self, user: User, data: Dict[str, Any], thumbnail=None, images: Iterable = ()
    ) -> ServiceResult[Gig]:
        """
        Publish a gig (freelancers only).

        ``data["price_plans"]`` must hold at least one plan and no tier twice.

        Example:
            >>> result = catalog_service.create_gig(
            ...     freelancer,
            ...     data={
            ...         "title": "Minimal logo",
            ...         "description": "Two concepts, vector files",
            ...         "category": "design",
            ...         "price_plans": [{"tier": "Basic", "price": "25.00", "delivery_time": 3, "revisions": 2}],
            ...     },
            ... )
        """
        if getattr(user, "role", None) != User.Role.FREELANCER:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only freelancers can create gigs")

        plans = data.get("price_plans") or []
        problem = _plan_problem(plans)
        if problem:
            return service_err(ErrorCodes.VALIDATION_ERROR, problem)

        uploaded: List[str] = []
        try:
            media = self._upload_media(user, thumbnail, images, uploaded)
        except StorageException as e:
            self.logger.error(f"Gig media upload failed for user {user.pk}: {e}")
            self._discard(uploaded)
            return service_err(ErrorCodes.STORAGE_ERROR, "Could not store gig media")

        try:
            with transaction.atomic():
                gig = Gig.objects.create(
                    owner=user,
                    title=data["title"],
                    description=data.get("description", ""),
                    category=data["category"],
                    keywords=list(data.get("keywords") or []),
                    requirements=data.get("requirements", ""),
                    thumbnail=media.get("thumbnail", ""),
                    images=media.get("images", []),
                )
                self._replace_plans(gig, plans)
                self._replace_faqs(gig, data.get("faqs") or [])
        except Exception as e:
            self.logger.error(f"Error creating gig for user {user.pk}: {e}", exc_info=True)
            self._discard(uploaded)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        gigs_created_total.labels(category=gig.category).inc()
        self.logger.info(f"Created gig {gig.id} '{gig.title}' with {len(plans)} plan(s) for {user.pk}")
        return self.get_gig(gig.id)

    @BaseService.log_performance
    def update_gig(
        self, user: User, gig_id, data: Dict[str, Any], thumbnail=None, images: Iterable = ()
    ) -> ServiceResult[Gig]:
        """
        Edit a gig (owner only).

        Plans and FAQs are replaced wholesale when present in ``data``.
        New images are appended to the gallery; a new thumbnail replaces the
        old one. Orders already placed keep their snapshot.
        """
        result = self.get_gig(gig_id)
        if not result.ok:
            return result
        gig = result.value
        if gig.owner_id != user.pk:
            return service_err(ErrorCodes.NOT_GIG_OWNER, "You do not own this gig")

        if "price_plans" in data:
            problem = _plan_problem(data["price_plans"] or [])
            if problem:
                return service_err(ErrorCodes.VALIDATION_ERROR, problem)

        uploaded: List[str] = []
        try:
            media = self._upload_media(user, thumbnail, images, uploaded)
        except StorageException as e:
            self.logger.error(f"Gig media upload failed for gig {gig_id}: {e}")
            self._discard(uploaded)
            return service_err(ErrorCodes.STORAGE_ERROR, "Could not store gig media")

        replaced_thumbnail = ""
        try:
            with transaction.atomic():
                gig = Gig.objects.select_for_update().get(id=gig.id)
                updated_fields = ["updated_at"]
                for field in GIG_FIELDS:
                    if field in data:
                        setattr(gig, field, data[field])
                        updated_fields.append(field)
                if "thumbnail" in media:
                    replaced_thumbnail = gig.thumbnail
                    gig.thumbnail = media["thumbnail"]
                    updated_fields.append("thumbnail")
                if media.get("images"):
                    gig.images = list(gig.images or []) + media["images"]
                    updated_fields.append("images")
                gig.save(update_fields=updated_fields)

                if "price_plans" in data:
                    self._replace_plans(gig, data["price_plans"])
                if "faqs" in data:
                    self._replace_faqs(gig, data["faqs"] or [])
        except Exception as e:
            self.logger.error(f"Error updating gig {gig_id}: {e}", exc_info=True)
            self._discard(uploaded)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if replaced_thumbnail:
            self._discard([replaced_thumbnail])

        self.logger.info(f"Updated gig {gig.id}, fields={sorted(k for k in data if k in GIG_FIELDS)}")
        return self.get_gig(gig.id)

    @BaseService.log_performance
    def delete_gig(self, user: User, gig_id) -> ServiceResult[bool]:
        """
        Delete a gig (owner only). Orders keep their plan snapshot and lose
        the gig link; stored media is removed best-effort.
        """
        result = self.get_gig(gig_id)
        if not result.ok:
            return result
        gig = result.value
        if gig.owner_id != user.pk:
            return service_err(ErrorCodes.NOT_GIG_OWNER, "You do not own this gig")

        media = [gig.thumbnail] if gig.thumbnail else []
        media += list(gig.images or [])
        title = gig.title
        gig.delete()

        self._discard(media)
        self.logger.warning(f"Deleted gig '{title}' (id={gig_id}) by user {user.pk}")
        return service_ok(True)

    # Helpers

    def _upload_media(self, user: User, thumbnail, images: Iterable, uploaded: List[str]) -> Dict[str, Any]:
        media: Dict[str, Any] = {}
        folder = f"gigs/{user.pk}"
        if thumbnail is not None:
            stored = self.storage.upload(
                thumbnail, folder=folder, content_type=getattr(thumbnail, "content_type", None)
            )
            uploaded.append(stored.url)
            media["thumbnail"] = stored.url
        image_urls = []
        for image in images or ():
            stored = self.storage.upload(image, folder=folder, content_type=getattr(image, "content_type", None))
            uploaded.append(stored.url)
            image_urls.append(stored.url)
        if image_urls:
            media["images"] = image_urls
        return media

    def _discard(self, references: Iterable[str]) -> None:
        for reference in references:
            try:
                self.storage.delete(reference)
            except StorageException as e:
                self.logger.warning(f"Could not delete stored file {reference}: {e}")

    def _replace_plans(self, gig: Gig, plans: List[Dict[str, Any]]) -> None:
        gig.price_plans.all().delete()
        PricePlan.objects.bulk_create(
            [
                PricePlan(
                    gig=gig,
                    tier=plan["tier"],
                    price=plan["price"],
                    delivery_time=plan["delivery_time"],
                    revisions=plan.get("revisions", 0),
                    features=list(plan.get("features") or []),
                    position=position,
                )
                for position, plan in enumerate(plans)
            ]
        )

    def _replace_faqs(self, gig: Gig, faqs: List[Dict[str, Any]]) -> None:
        gig.faqs.all().delete()
        GigFaq.objects.bulk_create(
            [
                GigFaq(gig=gig, question=faq["question"], answer=faq["answer"], position=position)
                for position, faq in enumerate(faqs)
            ]
        )


def _plan_problem(plans: List[Dict[str, Any]]) -> Optional[str]:
    if not plans:
        return "A gig needs at least one price plan"
    tiers = [plan.get("tier") for plan in plans]
    if len(set(tiers)) != len(tiers):
        return "Each plan tier can only appear once"
    return None


def _first_error(errors) -> str:
    for field, messages in errors.items():
        return f"{field}: {messages[0]}"
    return "Invalid filters"
