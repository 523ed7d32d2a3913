from django_filters import rest_framework as filters

from apps.liftapp.models import Lift


class LiftFilter(filters.FilterSet):
    """Filter for lifts"""

    lift_type = filters.ChoiceFilter(field_name="lift_type", choices=Lift.TYPE_CHOICES)
    in_maintenance = filters.BooleanFilter(field_name="in_maintenance")
    location = filters.CharFilter(field_name="location", lookup_expr="icontains")

    class Meta:
        model = Lift
        fields = ["lift_type", "in_maintenance", "location"]
