
import logging, os

##############################################################
## Helper Functions
##############################################################

LOG_FORMAT = '[%(asctime)s] %(name)s        %(levelname)s %(message)s'

def get_logger(name):
    logger = logging.getLogger(name)
    level = os.getenv('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
            level=level,
            format=LOG_FORMAT
        )
    return logger

def var_test(var):
    if isinstance(var, bool):
        resp = var
    elif isinstance(var, str):
        if var.lower() in ['true', '1', 'yes']:
            resp = True
        else:
            resp = False
    else:
        resp = False
    return resp

def str_value(value):
    """Return value as str, empty string for None."""
    if value is None:
        return ""
    return str(value)
