"""
School mixins — изоляция данных школы во views.

Школа берётся из claim текущего запроса (school_id в JWT), а не из
thread-local / middleware.
"""
from rest_framework.exceptions import PermissionDenied

from accounts.claims import get_request_claim


class SchoolContextMixin:
    """
    Mixin для APIView — даёт self.get_school().

    Использование:
        class MyView(SchoolContextMixin, APIView):
            def get(self, request):
                school = self.get_school()
                ...
    """

    def get_claim(self):
        if not hasattr(self, '_claim'):
            self._claim = get_request_claim(self.request)
        return self._claim

    def get_school(self):
        if not hasattr(self, '_school'):
            from .models import School

            claim = self.get_claim()
            school = None
            if claim is not None and claim.school_id:
                school = School.objects.filter(pk=claim.school_id).first()
            if school is None:
                raise PermissionDenied('Школа не определена.')
            self._school = school
        return self._school


class SchoolScopedViewSetMixin(SchoolContextMixin):
    """
    Mixin для DRF ViewSets — фильтрует queryset по школе из claim
    и устанавливает школу при создании объектов.

    Использование:
        class MyViewSet(SchoolScopedViewSetMixin, viewsets.ModelViewSet):
            queryset = MyModel.objects.all()
            serializer_class = MySerializer
    """

    school_field = 'school'

    def get_queryset(self):
        qs = super().get_queryset()
        return qs.filter(**{self.school_field: self.get_school()})

    def perform_create(self, serializer):
        serializer.save(**{self.school_field: self.get_school()})

    def perform_update(self, serializer):
        # При обновлении не меняем школу
        serializer.save()
