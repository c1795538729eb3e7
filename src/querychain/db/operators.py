# src/querychain/db/operators.py

# Maps operator names used in condition mappings to SQLAlchemy column methods.
# For example, `where("age", {"gte": 18})` calls `Column.__ge__(18)`.
OPERATOR_MAP = {
    'eq': '__eq__',         # Equal
    'neq': '__ne__',        # Not Equal
    'gt': '__gt__',         # Greater Than
    'gte': '__ge__',        # Greater Than or Equal
    'lt': '__lt__',         # Less Than
    'lte': '__le__',        # Less Than or Equal
    'like': 'like',         # String LIKE
    'ilike': 'ilike',       # String ILIKE (case-insensitive)
    'notlike': 'not_like',  # String NOT LIKE
    'in': 'in_',            # In a list of values
    'notin': 'not_in',      # Not in a list of values
    'between': 'between',   # Between two bounds (inclusive)
    'isnull': 'is_',        # Is Null (operand True) / Is Not Null (operand False)
}

# Operators that expect a list of values.
LIST_OPERATORS = {'in', 'notin', 'between'}

# Keys combining nested condition mappings instead of naming a column.
LOGICAL_OPERATORS = {'$or', '$and'}


class Op:
    """Operator names for building condition mappings."""

    EQ = 'eq'
    NE = 'neq'
    GT = 'gt'
    GTE = 'gte'
    LT = 'lt'
    LTE = 'lte'
    LIKE = 'like'
    ILIKE = 'ilike'
    NOT_LIKE = 'notlike'
    IN = 'in'
    NOT_IN = 'notin'
    BETWEEN = 'between'
    IS_NULL = 'isnull'
    OR = '$or'
    AND = '$and'
