''' Line grammar '''

import pyparsing as pp

from xvm.common.hwconf import INT32_MIN, INT32_MAX

# Every character str.split() treats as a separator
WHITESPACE = ''.join(chr(c) for c in range(0x3001) if chr(c).isspace())

comment = pp.Suppress(pp.Literal('//') + pp.rest_of_line)
comment.set_whitespace_chars(WHITESPACE)

token = pp.Regex(r'(?:(?!//)\S)+')
token.set_whitespace_chars(WHITESPACE)

line = pp.ZeroOrMore(token) + pp.Optional(comment)
line.set_whitespace_chars(WHITESPACE)


def s_dec_action(r):
    value = int(r[0])

    if not INT32_MIN <= value <= INT32_MAX:
        raise pp.ParseException(r[0], 0, 'Literal is out of 32-bit range')

    return value


s_dec_const = pp.Regex('[+-]?[0-9]+').set_parse_action(s_dec_action)
