"""Complexity and nesting fixtures (E1101, E1102, E1107, E1108)."""


def e1101_bad_deep_nesting(a, b, c, d, e, f, g):
    if a:
        if b:
            if c:
                if d:
                    if e:
                        if f:
                            if g:
                                return 1
    return 0


def e1101_bad_many_conditions(v1, v2, v3, v4, v5, v6, v7, v8, v9, v10, v11, v12, v13,
                              v14, v15, v16, v17, v18, v19, v20, v21, v22, v23, v24, v25, v26):
    return (v1 or v2 or v3 or v4 or v5 or v6 or v7 or v8 or v9 or v10 or v11 or v12 or v13
            or v14 or v15 or v16 or v17 or v18 or v19 or v20 or v21 or v22 or v23 or v24
            or v25 or v26)


def e1101_good_simple(items):
    total = 0
    for item in items:
        if item:
            total += 1
    return total


def e1102_bad_nested_blocks(rows):
    for row in rows:
        while row:
            try:
                if row.ready:
                    for cell in row.cells:
                        if cell:
                            return cell
            finally:
                row = row.next
    return None


def e1102_good_guard_clauses(rows):
    for row in rows:
        if not row.ready:
            continue
        return row
    return None


def e1107_bad_nested_ifs(user, order, item, stock):
    if user:
        if order:
            if item:
                if stock:
                    return True
    return False


def e1107_good_elif_chain(status):
    if status == "new":
        return 1
    elif status == "open":
        return 2
    elif status == "held":
        return 3
    elif status == "done":
        return 4
    elif status == "lost":
        return 5
    return 0


def e1107_good_three_levels(user, order, item):
    if user:
        if order:
            if item:
                return True
    return False


def e1108_bad_nested_match(event):
    match event.kind:
        case "key":
            match event.key:
                case "enter":
                    match event.modifier:
                        case "shift":
                            return "newline"
                        case _:
                            return "submit"
                case _:
                    return "type"
        case _:
            return None


def e1108_good_tuple_match(event):
    match (event.kind, event.key):
        case ("key", "enter"):
            return "submit"
        case ("key", _):
            return "type"
        case _:
            return None
