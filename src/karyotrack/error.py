class AnnotationError(Exception):
    """
    base class for errors raised while loading or laying out annotations
    """

    pass


class UnresolvedChromosome(AnnotationError):
    """
    raised (and recovered from) when a group of annotations references a chromosome
    which is not part of the diagram
    """

    def __init__(self, chr, count):
        self.chr = chr
        self.count = count
        super().__init__(
            f'Chromosome "{chr}" undefined in ideogram; {count} annotations not shown'
        )


class UnsupportedFormat(AnnotationError):
    """
    raised when the annotations resource is in a format which cannot be decoded
    """

    def __init__(self, extension):
        self.extension = extension
        super().__init__(
            'This package only supports BED and JSON annotations at the moment. '
            f'Sorry, check back soon for {str(extension).upper()} support!'
        )


class FetchFailed(AnnotationError):
    """
    raised when the annotations resource cannot be reached or read
    """

    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f'failed to fetch annotations from {url}: {reason}')


class MalformedPayload(AnnotationError):
    """
    raised when an annotations payload cannot be parsed or does not match its own key schema
    """

    pass
