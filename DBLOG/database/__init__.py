from .record_reader import LogRecord, OpenResult, OpenStatus, RecordReader, open_database

__all__ = ['LogRecord', 'OpenResult', 'OpenStatus', 'RecordReader', 'open_database']
