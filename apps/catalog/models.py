# ==========================================
# apps/catalog/models.py
# ==========================================

from django.db import models, transaction
from django.db.models import Max
from django.utils import timezone
from django.utils.text import slugify
from mptt.models import MPTTModel, TreeForeignKey
from decimal import Decimal
import uuid


class ProductQuerySet(models.QuerySet):

    def active(self):
        """Products that are not deleted and already available."""
        return self.filter(
            deleted_at__isnull=True,
            available_on__isnull=False,
            available_on__lte=timezone.now(),
        )

    def in_taxon(self, taxon):
        """Products classified under the taxon or any of its descendants."""
        return self.filter(
            taxons__in=taxon.get_descendants(include_self=True)
        ).distinct()


class Product(models.Model):
    """Sellable product."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, allow_unicode=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    brand = models.CharField(max_length=100, blank=True, db_index=True)
    available_on = models.DateTimeField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    taxons = models.ManyToManyField('Taxon', through='Classification', related_name='products', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['available_on', 'deleted_at'], name='products_available_idx'),
            models.Index(fields=['price'], name='products_price_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True) or str(self.id)
        super().save(*args, **kwargs)


class Taxonomy(models.Model):
    """Named category tree, e.g. 'Categories' or 'Brands'."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    position = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'taxonomies'
        ordering = ['position', 'name']
        verbose_name_plural = 'taxonomies'

    def __str__(self):
        return self.name

    @transaction.atomic
    def save(self, *args, **kwargs):
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            Taxon.objects.create(taxonomy=self, name=self.name)
            return

        root = self.root
        if root is not None and root.name != self.name:
            root.name = self.name
            root.save(update_fields=['name', 'updated_at'])

    @property
    def root(self):
        return self.taxons.filter(parent__isnull=True).first()

    def touch(self):
        self.updated_at = timezone.now()
        Taxonomy.objects.filter(pk=self.pk).update(updated_at=self.updated_at)


class Taxon(MPTTModel):
    """
    Node of a taxonomy tree, stored as a nested set.

    The permalink is derived from the parent's permalink when the taxon is
    created and does not change afterwards. Every save bumps the
    updated_at of all ancestors and of the taxonomy.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    permalink = models.CharField(max_length=255, blank=True, db_index=True)
    taxonomy = models.ForeignKey(Taxonomy, on_delete=models.CASCADE, related_name='taxons')
    parent = TreeForeignKey('self', on_delete=models.CASCADE, null=True, blank=True, related_name='children')
    description = models.TextField(blank=True)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.CharField(max_length=255, blank=True)
    meta_keywords = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'taxons'
        ordering = ['tree_id', 'lft']
        constraints = [
            models.UniqueConstraint(fields=['taxonomy', 'permalink'], name='unique_taxon_permalink'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self._state.adding:
            self.set_permalink()
        super().save(*args, **kwargs)
        self._touch_ancestors_and_taxonomy()

    def set_permalink(self):
        """
        Build the permalink from the parent's permalink and the name.

        A permalink given for a child keeps only its last segment.
        """
        if self.parent is not None:
            last_segment = self.permalink.split('/')[-1] if self.permalink else self._name_segment()
            self.permalink = f"{self.parent.permalink}/{last_segment or self._name_segment()}"
        elif not self.permalink:
            self.permalink = self._name_segment()

    def _name_segment(self):
        # Names without any word characters fall back to the id
        return slugify(self.name, allow_unicode=True) or str(self.id)

    def touch(self):
        self.updated_at = timezone.now()
        Taxon.objects.filter(pk=self.pk).update(updated_at=self.updated_at)
        self._touch_ancestors_and_taxonomy()

    def _touch_ancestors_and_taxonomy(self):
        # Tree columns of this instance may be stale after other inserts
        current = Taxon.objects.get(pk=self.pk)
        current.get_ancestors().update(updated_at=timezone.now())
        if self.taxonomy_id is not None:
            self.taxonomy.touch()

    def to_param(self):
        return self.permalink

    @property
    def seo_title(self):
        if self.meta_title:
            return self.meta_title
        if self.is_root_node():
            return self.name
        return f"{self.get_root().name} - {self.name}"

    @property
    def pretty_name(self):
        """Ancestor names followed by the taxon's own, joined by arrows."""
        ancestor_chain = ''.join(f"{ancestor.name} -> " for ancestor in self.get_ancestors())
        return ancestor_chain + self.name

    def active_products(self):
        return self.products.active()

    def applicable_filters(self):
        """Product filters offered on this taxon's page."""
        from .product_filters import price_filter, brand_filter

        return [
            price_filter(),
            brand_filter(self.products.all()),
        ]

    def set_child_index(self, index):
        """Move the taxon to a 0-based position among its siblings."""
        if self._state.adding or self.parent is None:
            return
        self.move_to_child_with_index(self.parent, int(index))

    def move_to_child_with_index(self, parent, index):
        """
        Make the taxon the child of parent at the given 0-based position.

        The position is the one the taxon ends up at once the move is done.
        """
        # mptt moves read tree columns from the instances, so none may be stale
        self.refresh_from_db()
        parent = Taxon.objects.get(pk=parent.pk)
        children = list(Taxon.objects.filter(parent_id=parent.pk).order_by('lft'))
        ids = [child.id for child in children]
        my_position = ids.index(self.id) if self.id in ids else None

        if not children:
            self.move_to(parent, 'first-child')
        elif index >= len(children):
            if children[-1].id == self.id:
                return
            self.move_to(children[-1], 'right')
        elif my_position == index:
            return
        elif my_position is not None and my_position < index:
            # The node now at index shifts left once self is taken out
            self.move_to(children[index], 'right')
        else:
            self.move_to(children[index], 'left')
        self.refresh_from_db()


class Classification(models.Model):
    """Position of a product inside a taxon."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='classifications')
    taxon = models.ForeignKey(Taxon, on_delete=models.CASCADE, related_name='classifications')
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'classifications'
        unique_together = [['product', 'taxon']]
        indexes = [
            models.Index(fields=['taxon', 'position'], name='classifications_position_idx'),
        ]
        ordering = ['position']

    def __str__(self):
        return f"{self.product.name} in {self.taxon.name} (#{self.position})"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.position:
            last = Classification.objects.filter(taxon_id=self.taxon_id).aggregate(last=Max('position'))['last']
            self.position = (last or 0) + 1
        super().save(*args, **kwargs)
        self.taxon.touch()

    def delete(self, *args, **kwargs):
        taxon = self.taxon
        result = super().delete(*args, **kwargs)
        taxon.touch()
        return result


class Prototype(models.Model):
    """Template for new products, preselecting their taxons."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    taxons = models.ManyToManyField(Taxon, related_name='prototypes', blank=True, db_table='taxons_prototypes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'prototypes'
        ordering = ['name']

    def __str__(self):
        return self.name
