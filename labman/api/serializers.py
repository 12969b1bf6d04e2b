"""
Labman API Serializers.
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework import serializers

from labman.conf import get_catalog
from labman.exceptions import LabError
from labman.models import (
    Client,
    Employee,
    Invoice,
    InvoiceLine,
    Order,
    OrderLine,
    OrderStatus,
    InvoiceStatus,
    Product,
    ProductKind,
    RawMaterial,
)
from labman.protocols.catalog import KIND_PRODUCT, Component
from labman.services.catalog import PARENT_MESSAGES, kind_violation, parent_violation
from labman.services.orders import place_order, set_order_lines
from labman.services.pricing import find_duplicate


def breakdown_data(breakdown, product_id=None) -> dict:
    """Serialize a PriceBreakdown."""
    return {
        "product": product_id,
        "materials": breakdown.materials,
        "labor": breakdown.labor,
        "total": breakdown.total,
        "components": [
            {"material": c.material_id, "quantity": c.quantity}
            for c in breakdown.components
        ],
        "is_complete": breakdown.is_complete,
        "missing": [
            {"kind": m.kind, "ref_id": m.ref_id, "referenced_by": m.referenced_by}
            for m in breakdown.missing
        ],
    }


def _components(items) -> list[Component]:
    return [Component(item["material"].pk, float(item["quantity"])) for item in items]


def _validate_draft_parent(attrs, product_id=None):
    parent = attrs.get("parent")
    if parent is None:
        return attrs
    code = parent_violation(product_id, KIND_PRODUCT, parent.pk, get_catalog())
    if code is not None:
        raise serializers.ValidationError({"parent": [str(PARENT_MESSAGES[code])]})
    return attrs


class RawMaterialSerializer(serializers.ModelSerializer):
    """Serializer for RawMaterial model."""

    class Meta:
        model = RawMaterial
        fields = [
            "id",
            "name",
            "unit_price",
            "unit",
            "stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class ComponentSerializer(serializers.Serializer):
    """One (material, quantity) line."""

    material = serializers.PrimaryKeyRelatedField(queryset=RawMaterial.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=4)

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Must be greater than zero.")
        return value


class ProductSerializer(serializers.ModelSerializer):
    """
    Serializer for Product model.

    Writes components together with the product. Rejects an invalid base
    product and a bill of materials identical to another product's.
    """

    components = ComponentSerializer(many=True, required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "kind",
            "name",
            "description",
            "parent",
            "components",
            "labor_price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate(self, attrs):
        instance = self.instance
        kind = attrs.get("kind", instance.kind if instance else ProductKind.PRODUCT)
        if kind == ProductKind.SERVICE:
            if instance is not None:
                code = kind_violation(instance.pk, kind, get_catalog())
                if code is not None:
                    raise serializers.ValidationError({"kind": [str(PARENT_MESSAGES[code])]})
            attrs["parent"] = None
            attrs["components"] = []
            return attrs

        parent = attrs["parent"] if "parent" in attrs else (instance.parent if instance else None)
        parent_id = parent.pk if parent else None
        product_id = instance.pk if instance else None

        catalog = get_catalog()
        code = parent_violation(product_id, kind, parent_id, catalog)
        if code is not None:
            raise serializers.ValidationError({"parent": [str(PARENT_MESSAGES[code])]})

        if "components" in attrs:
            components = _components(attrs["components"])
        elif instance is not None:
            components = list(instance.as_info().bom)
        else:
            components = []

        duplicate = find_duplicate(components, parent_id, catalog, exclude_id=product_id)
        if duplicate is not None:
            raise serializers.ValidationError(
                {"components": [f"Same materials and quantities as '{duplicate}'."]}
            )
        return attrs

    def _save_components(self, product, components):
        if components is not None:
            product.set_components(
                (item["material"].pk, item["quantity"]) for item in components
            )

    def create(self, validated_data):
        components = validated_data.pop("components", None)
        try:
            with transaction.atomic():
                product = Product.objects.create(**validated_data)
                self._save_components(product, components)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return product

    def update(self, instance, validated_data):
        components = validated_data.pop("components", None)
        try:
            with transaction.atomic():
                for attr, value in validated_data.items():
                    setattr(instance, attr, value)
                instance.save()
                self._save_components(instance, components)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return instance


class DuplicateCheckSerializer(serializers.Serializer):
    """Input for products/check-duplicate/."""

    components = ComponentSerializer(many=True)
    parent = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.all(), required=False, allow_null=True
    )
    exclude = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        return _validate_draft_parent(attrs, attrs.get("exclude"))

    def components_list(self) -> list[Component]:
        return _components(self.validated_data["components"])


class QuoteSerializer(serializers.Serializer):
    """Input for products/quote/."""

    components = ComponentSerializer(many=True)
    parent = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.all(), required=False, allow_null=True
    )
    labor_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default=0, min_value=0
    )

    def validate(self, attrs):
        return _validate_draft_parent(attrs)

    def components_list(self) -> list[Component]:
        return _components(self.validated_data["components"])


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = [
            "id",
            "last_name",
            "first_name",
            "national_id",
            "phone",
            "email",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class EmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = [
            "id",
            "last_name",
            "first_name",
            "job_title",
            "phone",
            "email",
            "is_active",
            "user",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class OrderLineSerializer(serializers.ModelSerializer):
    """Serializer for OrderLine model."""

    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())

    class Meta:
        model = OrderLine
        fields = ["id", "product", "quantity", "notes"]
        read_only_fields = ["id"]

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Must be greater than zero.")
        return value


class OrderSerializer(serializers.ModelSerializer):
    """
    Serializer for Order model.

    Lines and total are written through labman.services.orders so they
    are always stored together.
    """

    lines = OrderLineSerializer(many=True, required=False)

    class Meta:
        model = Order
        fields = [
            "id",
            "code",
            "client",
            "technician",
            "status",
            "payment_method",
            "ordered_on",
            "estimated_delivery",
            "delivered_at",
            "advance",
            "cas_number",
            "cas_date",
            "cas_value",
            "lines",
            "total",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "code",
            "status",
            "delivered_at",
            "total",
            "created_at",
            "updated_at",
        ]

    @staticmethod
    def _line_dicts(lines):
        return [
            {
                "product": line["product"].pk,
                "quantity": line["quantity"],
                "notes": line.get("notes", ""),
            }
            for line in lines
        ]

    def _user(self):
        request = self.context.get("request")
        return request.user if request else None

    def create(self, validated_data):
        lines = validated_data.pop("lines", [])
        client = validated_data.pop("client")
        try:
            return place_order(
                client, self._line_dicts(lines), user=self._user(), **validated_data
            )
        except LabError as exc:
            raise serializers.ValidationError(exc.as_dict())

    def update(self, instance, validated_data):
        lines = validated_data.pop("lines", None)
        try:
            with transaction.atomic():
                for attr, value in validated_data.items():
                    setattr(instance, attr, value)
                instance.save()
                if lines is not None:
                    set_order_lines(instance, self._line_dicts(lines), user=self._user())
        except LabError as exc:
            raise serializers.ValidationError(exc.as_dict())
        return instance


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class InvoiceLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = InvoiceLine
        fields = ["id", "name", "quantity", "unit_price", "total"]


class InvoiceSerializer(serializers.ModelSerializer):
    """Serializer for Invoice model (read-only document)."""

    lines = InvoiceLineSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "code",
            "order",
            "order_code",
            "client_last_name",
            "client_first_name",
            "client_national_id",
            "client_phone",
            "client_email",
            "client_address",
            "lines",
            "subtotal",
            "vat_percent",
            "vat_total",
            "total",
            "payment_method",
            "advance",
            "cas_value",
            "balance_due",
            "issued_on",
            "due_on",
            "status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class IssueInvoiceSerializer(serializers.Serializer):
    """Input for invoices/issue/."""

    order = serializers.PrimaryKeyRelatedField(queryset=Order.objects.all())
    vat_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, required=False, min_value=0
    )
    issued_on = serializers.DateField(required=False)
    due_on = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InvoiceStatus.choices)
