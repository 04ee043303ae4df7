import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Catalog filters: category equality, name substring, inclusive price range.

    ``search`` deliberately targets the name only, never the description.
    """

    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    search = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["category", "search", "min_price", "max_price"]
