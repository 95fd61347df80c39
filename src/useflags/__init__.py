__title__ = 'useflags'
__version__ = '0.3.0'
