"""
Django Ledger created by Miguel Sanda <msanda@arrobalytics.com>.
Copyright© EDMA Group Inc licensed under the GPLv3 Agreement.

Contributions to this module:
    * Miguel Sanda <msanda@arrobalytics.com>

A HistoryModel records the changes a user made to any model instance, such as a TransactionModel receiving a payment.
Changes are stored as JSON keyed by field name:

    * Scalar fields: {"type": <kind>, "from": <value>, "to": <value>}.
    * Nested collections, e.g. the pay plans of a transaction: a list with one item per changed row. New rows are
      stored as {"index": <position>, "new_record": true}. Changed rows store the scalar diffs of their fields plus
      the "id" of the row.

HistoryModel.get_history_data parses the stored JSON back into FieldDiff, NewRowDiff and RowDiff values, casting every
value according to its FieldKindEnum.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from uuid import uuid4

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.db.models import Manager, QuerySet
from django.utils.dateparse import parse_date, parse_datetime, parse_time
from django.utils.translation import gettext_lazy as _

from django_account_ledger.models.mixins import CreateUpdateMixIn

__all__ = [
    'FieldKindEnum',
    'FieldDiff',
    'NewRowDiff',
    'RowDiff',
    'get_field_kind',
    'HistoryModelQuerySet',
    'HistoryModelManager',
    'HistoryModelAbstract',
    'HistoryModel',
]

UserModel = settings.AUTH_USER_MODEL

SKIPPED_FIELDS = ('created', 'updated')


class FieldKindEnum(Enum):
    STRING = 'string'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    FLOAT = 'float'
    DATE = 'date'
    DATETIME = 'datetime'
    TIME = 'time'
    DECIMAL = 'decimal'


@dataclass(frozen=True)
class FieldDiff:
    kind: FieldKindEnum
    from_value: Any
    to_value: Any


@dataclass(frozen=True)
class NewRowDiff:
    index: int


@dataclass(frozen=True)
class RowDiff:
    id: Any
    fields: Dict[str, FieldDiff] = field(default_factory=dict)


def get_field_kind(model_field) -> FieldKindEnum:
    """
    Maps a Django model field to the kind used to store and parse its values.
    Relations are stored by their primary key as strings.
    """
    if isinstance(model_field, models.DateTimeField):
        return FieldKindEnum.DATETIME
    elif isinstance(model_field, models.DateField):
        return FieldKindEnum.DATE
    elif isinstance(model_field, models.TimeField):
        return FieldKindEnum.TIME
    elif isinstance(model_field, models.BooleanField):
        return FieldKindEnum.BOOLEAN
    elif isinstance(model_field, models.DecimalField):
        return FieldKindEnum.DECIMAL
    elif isinstance(model_field, models.FloatField):
        return FieldKindEnum.FLOAT
    elif isinstance(model_field, models.IntegerField):
        return FieldKindEnum.INTEGER
    return FieldKindEnum.STRING


def dump_value(kind: FieldKindEnum, value):
    if value is None:
        return None
    if kind in (FieldKindEnum.DATE, FieldKindEnum.DATETIME, FieldKindEnum.TIME):
        return value.isoformat()
    elif kind in (FieldKindEnum.DECIMAL, FieldKindEnum.STRING):
        return str(value)
    return value


def load_value(kind: FieldKindEnum, value):
    if value is None:
        return None
    if kind == FieldKindEnum.DECIMAL:
        return Decimal(str(value))
    elif kind == FieldKindEnum.DATE:
        return parse_date(value)
    elif kind == FieldKindEnum.DATETIME:
        return parse_datetime(value)
    elif kind == FieldKindEnum.TIME:
        return parse_time(value)
    elif kind == FieldKindEnum.INTEGER:
        return int(value)
    elif kind == FieldKindEnum.FLOAT:
        return float(value)
    elif kind == FieldKindEnum.BOOLEAN:
        return bool(value)
    return str(value)


def get_tracked_fields(model_class) -> List:
    return [
        f for f in model_class._meta.concrete_fields
        if not f.primary_key and f.name not in SKIPPED_FIELDS
    ]


def get_snapshot(instance) -> Dict[str, Any]:
    return {f.attname: getattr(instance, f.attname) for f in get_tracked_fields(instance.__class__)}


def diff_fields(model_class, before: Dict[str, Any], after: Dict[str, Any]) -> Dict[str, dict]:
    changes = dict()
    for model_field in get_tracked_fields(model_class):
        name = model_field.attname
        if name not in before:
            continue
        from_value = before[name]
        to_value = after.get(name)
        if from_value != to_value:
            kind = get_field_kind(model_field)
            changes[name] = {
                'type': kind.value,
                'from': dump_value(kind, from_value),
                'to': dump_value(kind, to_value)
            }
    return changes


def diff_rows(before_rows: Dict[Any, Dict[str, Any]], rows: Iterable) -> List[dict]:
    changes = list()
    for index, row in enumerate(rows):
        if row.pk not in before_rows:
            changes.append({'index': index, 'new_record': True})
            continue
        row_changes = diff_fields(row.__class__, before_rows[row.pk], get_snapshot(row))
        if row_changes:
            row_changes['id'] = str(row.pk)
            changes.append(row_changes)
    return changes


def parse_field_diff(data: dict) -> FieldDiff:
    kind = FieldKindEnum(data['type'])
    return FieldDiff(kind=kind,
                     from_value=load_value(kind, data.get('from')),
                     to_value=load_value(kind, data.get('to')))


def parse_row_diff(data: dict) -> Union[NewRowDiff, RowDiff]:
    if data.get('new_record'):
        return NewRowDiff(index=data['index'])
    return RowDiff(id=data.get('id'),
                   fields={k: parse_field_diff(v) for k, v in data.items() if k != 'id'})


class HistoryModelQuerySet(QuerySet):

    def for_instance(self, instance):
        return self.filter(
            content_type=ContentType.objects.get_for_model(instance.__class__),
            object_id=str(instance.pk)
        )


class HistoryModelManager(Manager):

    def record(self,
               instance,
               before: Dict[str, Any],
               user_model=None,
               nested: Optional[Dict[str, Tuple[Dict[Any, Dict[str, Any]], Iterable]]] = None):
        """
        Records the changes of an instance since a snapshot was taken.

        Parameters
        ----------
        instance:
            The changed model instance.
        before: dict
            The snapshot of the instance taken before the changes, see HistoryModel.snapshot.
        user_model
            The user who made the changes.
        nested: dict
            Optional nested collections keyed by name. Each value is a tuple of the rows snapshot taken before the
            changes, see HistoryModel.snapshot_rows, and the current rows in display order.

        Returns
        -------
        HistoryModel
            The new HistoryModel, None if nothing changed.
        """
        history_data = diff_fields(instance.__class__, before, get_snapshot(instance))
        for name, (before_rows, rows) in (nested or dict()).items():
            row_changes = diff_rows(before_rows, rows)
            if row_changes:
                history_data[name] = row_changes

        if not history_data:
            return None

        return self.create(
            content_type=ContentType.objects.get_for_model(instance.__class__),
            object_id=str(instance.pk),
            user=user_model,
            history_data=history_data
        )


class HistoryModelAbstract(CreateUpdateMixIn):
    """
    Attributes
    ----------
    uuid : UUID
        The primary key of the history record.
    content_type : ContentType
        The model of the changed instance.
    object_id : str
        The primary key of the changed instance.
    historiable : GenericForeignKey
        The changed instance.
    user : UserModel
        The user who made the changes.
    history_data : dict
        The JSON encoded changes.
    """
    uuid = models.UUIDField(default=uuid4, editable=False, primary_key=True)
    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.CharField(max_length=40)
    historiable = GenericForeignKey('content_type', 'object_id')
    user = models.ForeignKey(UserModel,
                             on_delete=models.SET_NULL,
                             null=True,
                             blank=True,
                             related_name='account_ledger_histories',
                             verbose_name=_('User'))
    history_data = models.JSONField(default=dict, verbose_name=_('History Data'))

    objects = HistoryModelManager.from_queryset(queryset_class=HistoryModelQuerySet)()

    class Meta:
        abstract = True
        ordering = ['-created']
        verbose_name = _('History')
        verbose_name_plural = _('Histories')
        indexes = [
            models.Index(fields=['content_type', 'object_id']),
        ]

    def __str__(self):
        return f'History {self.content_type_id}:{self.object_id} {self.created}'

    @staticmethod
    def snapshot(instance) -> Dict[str, Any]:
        return get_snapshot(instance)

    @staticmethod
    def snapshot_rows(rows: Iterable) -> Dict[Any, Dict[str, Any]]:
        return {row.pk: get_snapshot(row) for row in rows}

    def history_attributes(self) -> List[str]:
        return list(self.history_data.keys())

    def get_history_data(self) -> Dict[str, Union[FieldDiff, List[Union[NewRowDiff, RowDiff]]]]:
        """
        Parses the stored changes.

        Returns
        -------
        dict
            FieldDiff values for scalar fields, lists of NewRowDiff and RowDiff values for nested collections.
        """
        parsed = dict()
        for name, data in self.history_data.items():
            if isinstance(data, list):
                parsed[name] = [parse_row_diff(row) for row in data]
            else:
                parsed[name] = parse_field_diff(data)
        return parsed


class HistoryModel(HistoryModelAbstract):
    """
    Base History Model from Abstract.
    """

    class Meta(HistoryModelAbstract.Meta):
        abstract = False
