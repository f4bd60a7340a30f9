from enum import StrEnum


class UnitKind(StrEnum):
    TIER = 'tier'
    SEAT = 'seat'


class ContainerType(StrEnum):
    ROW = 'row'
    TABLE = 'table'
