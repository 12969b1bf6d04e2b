"""
Labman API ViewSets.
"""

from django.db.models import ProtectedError
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from labman.analytics import InvoiceAnalytics, MaterialAnalytics, OrderAnalytics
from labman.conf import get_catalog
from labman.exceptions import LabError
from labman.models import (
    Client,
    Employee,
    Invoice,
    Module,
    Order,
    Product,
    RawMaterial,
)
from labman.services import invoices, orders
from labman.services.catalog import derived_products
from labman.services.pricing import find_duplicate, price_breakdown, quote

from .permissions import HasModuleAccess
from .serializers import (
    ClientSerializer,
    DuplicateCheckSerializer,
    EmployeeSerializer,
    InvoiceSerializer,
    InvoiceStatusSerializer,
    IssueInvoiceSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    ProductSerializer,
    QuoteSerializer,
    RawMaterialSerializer,
    breakdown_data,
)


class ModuleViewSetMixin:
    """Authenticated + module access; PROTECTed deletes answer 400."""

    permission_classes = [IsAuthenticated, HasModuleAccess]
    module = None

    def destroy(self, request, *args, **kwargs):
        try:
            return super().destroy(request, *args, **kwargs)
        except ProtectedError:
            return Response(
                {"error": "Object is referenced by other records and cannot be deleted."},
                status=status.HTTP_400_BAD_REQUEST,
            )


class RawMaterialViewSet(ModuleViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for RawMaterial.

    Deleting a material leaves product components pointing at it; their
    prices count it as zero.
    """

    module = Module.MATERIALS
    queryset = RawMaterial.objects.all()
    serializer_class = RawMaterialSerializer


class ProductViewSet(ModuleViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for Product.

    list / create / retrieve / update / destroy
    price: Price breakdown of a stored product
    derived: Products built on this one
    check_duplicate: Look for a product with the same effective BOM
    quote: Price a draft product
    """

    module = Module.PRODUCTS
    queryset = Product.objects.prefetch_related("components")
    serializer_class = ProductSerializer

    @action(detail=True, methods=["get"])
    def price(self, request, pk=None):
        """
        Price breakdown of a product.

        GET /api/labman/products/{pk}/price/
        """
        product = self.get_object()
        catalog = get_catalog()
        try:
            breakdown = price_breakdown(product.as_info(), catalog)
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response(breakdown_data(breakdown, product.pk))

    @action(detail=True, methods=["get"])
    def derived(self, request, pk=None):
        """
        Products whose base product is this one.

        GET /api/labman/products/{pk}/derived/
        """
        product = self.get_object()
        return Response(
            [{"id": p.id, "name": p.name} for p in derived_products(product.pk, get_catalog())]
        )

    @action(detail=False, methods=["post"], url_path="check-duplicate")
    def check_duplicate(self, request):
        """
        Look for another product with the same materials and quantities.

        POST /api/labman/products/check-duplicate/
        {
            "components": [{"material": 1, "quantity": "2"}],
            "parent": 3,      // optional
            "exclude": 7      // optional, product being edited
        }
        """
        serializer = DuplicateCheckSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        parent = serializer.validated_data.get("parent")
        try:
            name = find_duplicate(
                serializer.components_list(),
                parent.pk if parent else None,
                get_catalog(),
                exclude_id=serializer.validated_data.get("exclude"),
            )
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response({"duplicate": name is not None, "name": name})

    @action(detail=False, methods=["post"])
    def quote(self, request):
        """
        Price a draft product before saving it.

        POST /api/labman/products/quote/
        {
            "components": [{"material": 1, "quantity": "1"}],
            "parent": 3,
            "labor_price": "30.00"
        }
        """
        serializer = QuoteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        parent = serializer.validated_data.get("parent")
        try:
            breakdown = quote(
                serializer.components_list(),
                parent.pk if parent else None,
                float(serializer.validated_data["labor_price"]),
                get_catalog(),
            )
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response(breakdown_data(breakdown))


class ClientViewSet(ModuleViewSetMixin, viewsets.ModelViewSet):
    module = Module.CLIENTS
    queryset = Client.objects.all()
    serializer_class = ClientSerializer


class EmployeeViewSet(ModuleViewSetMixin, viewsets.ModelViewSet):
    module = Module.EMPLOYEES
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer


class OrderViewSet(ModuleViewSetMixin, viewsets.ModelViewSet):
    """
    ViewSet for Order.

    list / create / retrieve / update / destroy
    status: Change the order status
    recalculate: Recompute the total with current prices
    """

    module = Module.ORDERS
    queryset = Order.objects.select_related("client", "technician").prefetch_related("lines")
    serializer_class = OrderSerializer

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        Change the order status.

        POST /api/labman/orders/{pk}/status/
        {"status": "delivered"}
        """
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            order.set_status(serializer.validated_data["status"], user=request.user)
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": order.status, "delivered_at": order.delivered_at})

    @action(detail=True, methods=["post"])
    def recalculate(self, request, pk=None):
        """
        Recompute the stored total from the current catalog.

        POST /api/labman/orders/{pk}/recalculate/
        """
        order = self.get_object()
        try:
            result = orders.recalculate_order(order)
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "total": order.total,
                "is_complete": result.is_complete,
                "missing": [m.ref_id for m in result.missing],
            }
        )


class InvoiceViewSet(ModuleViewSetMixin, viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for Invoice (read-only documents).

    issue: Issue the invoice of an order
    status: Mark paid / cancelled
    """

    module = Module.INVOICES
    queryset = Invoice.objects.prefetch_related("lines")
    serializer_class = InvoiceSerializer

    @action(detail=False, methods=["post"])
    def issue(self, request):
        """
        Issue the invoice of an order.

        POST /api/labman/invoices/issue/
        {"order": 12, "vat_percent": "19"}
        """
        serializer = IssueInvoiceSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = dict(serializer.validated_data)
        order = data.pop("order")
        try:
            invoice = invoices.issue_invoice(order, user=request.user, **data)
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        Change the invoice status.

        POST /api/labman/invoices/{pk}/status/
        {"status": "paid"}
        """
        invoice = self.get_object()
        serializer = InvoiceStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            invoice.set_status(serializer.validated_data["status"], user=request.user)
        except LabError as e:
            return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": invoice.status})


class DashboardViewSet(viewsets.ViewSet):
    """
    Dashboard figures.

    GET /api/labman/dashboard/
    """

    permission_classes = [IsAuthenticated, HasModuleAccess]
    module = Module.DASHBOARD

    def list(self, request):
        return Response(
            {
                "orders": OrderAnalytics.summary(),
                "invoices": InvoiceAnalytics.summary(),
                "stock_value": MaterialAnalytics.stock_value(),
            }
        )
