# banking/api/filters.py

import django_filters
from django.db.models import Q

from banking.models import Transaction
from banking.services.accounts import accounts_touching


class TransactionFilter(django_filters.FilterSet):
    """
    ?type=income|expense|transfer
    ?account=<id>          (account, source or destination)
    ?date_from=YYYY-MM-DD  ?date_to=YYYY-MM-DD
    ?state=completed|voided
    ?search=<text>         (description / reference number)
    """

    type = django_filters.ChoiceFilter(choices=Transaction.TYPE_CHOICES)
    state = django_filters.ChoiceFilter(choices=Transaction.STATE_CHOICES)
    account = django_filters.NumberFilter(method="filter_account")
    date_from = django_filters.DateFilter(field_name="transaction_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="transaction_date", lookup_expr="lte")
    category = django_filters.CharFilter(lookup_expr="iexact")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Transaction
        fields = ["type", "state", "account", "date_from", "date_to", "category", "search"]

    def filter_account(self, queryset, name, value):
        return queryset.filter(accounts_touching(value))

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(description__icontains=value) | Q(reference_number__icontains=value)
        )
