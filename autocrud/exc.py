DUPLICATE_KEY_MESSAGE = 'duplicate unique id'


class Error(Exception):

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ModelError(Error):

    def __init__(self, message, model):
        super().__init__(message)
        self.model = model

    def __str__(self):
        return '[{}] {}'.format(self.model.name, self.message)


class APIError(ModelError):

    def __init__(self, message, model, status=400):
        super().__init__(message, model)
        self.status = status


class StorageError(APIError):

    def __init__(self, message, model):
        super().__init__(message, model, 500)


class DuplicateKey(StorageError):

    def __init__(self, model):
        super().__init__(DUPLICATE_KEY_MESSAGE, model)
        self.status = 400


class DataTypeError(Error):

    def __init__(self, message, data_type):
        super().__init__(message)
        self.data_type = data_type

    def __str__(self):
        return '{} {}'.format(self.data_type, self.message)


def get_error_object(e):
    if isinstance(e, APIError):
        return dict(errors=[dict(
            title=str(e),
            status=e.status if hasattr(e, 'status') else 500)])
    raise e
