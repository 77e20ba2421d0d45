class DynstructException(Exception):
    '''Base class to extend in order to throw exception in dynstruct.

    It takes an optional message and the chain of field names that leads
    from the root to the slot that caused the exception: the containers
    prepend their own names while the exception bubbles up.
    '''

    def __init__(self, msg='', chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(msg)

    @property
    def where(self):
        '''Dotted representation of the chain, list indexes are kept as "[n]".'''
        where = 'root'
        for component in self.chain:
            where += component if component.startswith('[') else f'.{component}'

        return where

    def __str__(self):
        msg = super().__str__()
        return f'{msg} (at {self.where})' if self.chain else msg


class MalformedPath(DynstructException):
    '''The text of a path expression can't be parsed completely.'''
    pass


class UnresolvedReference(DynstructException):
    pass


class NonNumericValue(DynstructException):
    '''Numeric coercion requested to an instance without a number.'''
    pass


class StructuralFailure(DynstructException):
    '''Any other violation found while decoding, like reading
    outside of the buffer.'''
    pass
