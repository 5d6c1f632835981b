from ...domain.exceptions import SurveyMapperError


class DataSourceError(SurveyMapperError):
    pass


class DataSourceNotFoundError(DataSourceError):
    pass


class DataParseError(DataSourceError):
    pass
