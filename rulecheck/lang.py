"""Bundled message catalogs.

Each catalog maps a rule key to its message. Size rules map to a table
keyed by attribute type.
"""

EN: dict[str, str | dict[str, str]] = {
    "accepted": "The :attribute must be accepted.",
    "active_url": "The :attribute is not a valid URL.",
    "after": "The :attribute must be a date after :date.",
    "alpha": "The :attribute may only contain letters.",
    "alpha_dash": "The :attribute may only contain letters, numbers, and dashes.",
    "alpha_num": "The :attribute may only contain letters and numbers.",
    "array": "The :attribute must be an array.",
    "before": "The :attribute must be a date before :date.",
    "between": {
        "numeric": "The :attribute must be between :min and :max.",
        "file": "The :attribute must be between :min and :max kilobytes.",
        "string": "The :attribute must be between :min and :max characters.",
        "array": "The :attribute must have between :min and :max items.",
    },
    "boolean": "The :attribute field must be true or false.",
    "confirmed": "The :attribute confirmation does not match.",
    "date": "The :attribute is not a valid date.",
    "date_format": "The :attribute does not match the format :format.",
    "different": "The :attribute and :other must be different.",
    "digits": "The :attribute must be :digits digits.",
    "digits_between": "The :attribute must be between :min and :max digits.",
    "email": "The :attribute must be a valid email address.",
    "filled": "The :attribute field is required.",
    "exists": "The selected :attribute is invalid.",
    "image": "The :attribute must be an image.",
    "in": "The selected :attribute is invalid.",
    "integer": "The :attribute must be an integer.",
    "ip": "The :attribute must be a valid IP address.",
    "ip4": "The :attribute must be a valid IPv4 address.",
    "ip6": "The :attribute must be a valid IPv6 address.",
    "max": {
        "numeric": "The :attribute may not be greater than :max.",
        "file": "The :attribute may not be greater than :max kilobytes.",
        "string": "The :attribute may not be greater than :max characters.",
        "array": "The :attribute may not have more than :max items.",
    },
    "mimes": "The :attribute must be a file of type: :values.",
    "min": {
        "numeric": "The :attribute must be at least :min.",
        "file": "The :attribute must be at least :min kilobytes.",
        "string": "The :attribute must be at least :min characters.",
        "array": "The :attribute must have at least :min items.",
    },
    "not_in": "The selected :attribute is invalid.",
    "numeric": "The :attribute must be a number.",
    "regex": "The :attribute format is invalid.",
    "required": "The :attribute field is required.",
    "required_if": "The :attribute field is required when :other is :value.",
    "required_with": "The :attribute field is required when :values is present.",
    "required_with_all": "The :attribute field is required when :values is present.",
    "required_without": "The :attribute field is required when :values is not present.",
    "required_without_all": "The :attribute field is required when none of :values are present.",
    "same": "The :attribute and :other must match.",
    "size": {
        "numeric": "The :attribute must be :size.",
        "file": "The :attribute must be :size kilobytes.",
        "string": "The :attribute must be :size characters.",
        "array": "The :attribute must contain :size items.",
    },
    "unique": "The :attribute has already been taken.",
    "url": "The :attribute format is invalid.",
    "timezone": "The :attribute must be a valid zone.",
}

ES: dict[str, str | dict[str, str]] = {
    "accepted": "Se debe aceptar el :attribute.",
    "active_url": "El :attribute no es una URL válida.",
    "after": "El :attribute debe ser una fecha posterior a :date.",
    "alpha": "El :attribute solo puede contener letras.",
    "alpha_dash": "El :attribute solo puede contener letras, números y guiones.",
    "alpha_num": "El :attribute solo puede contener letras y números.",
    "array": "El :attribute debe ser una matriz.",
    "before": "El :attribute debe ser una fecha anterior a :date.",
    "between": {
        "numeric": "El :attribute debe estar entre :min y :max.",
        "file": "El :attribute debe estar entre :min y :max kilobytes.",
        "string": "El :attribute debe tener entre :min y :max caracteres.",
        "array": "El :attribute debe tener entre :min y :max elementos.",
    },
    "boolean": "El campo :attribute debe ser verdadero o falso.",
    "confirmed": "La confirmación de :attribute no coincide.",
    "date": "El :attribute no es una fecha válida.",
    "date_format": "El :attribute no coincide con el formato :format.",
    "different": "El :attribute y :other deben ser diferentes.",
    "digits": "El :attribute debe tener :digits dígitos.",
    "digits_between": "El :attribute debe tener entre :min y :max dígitos.",
    "email": "El :attribute debe ser una dirección de correo electrónico válida.",
    "filled": "El campo :attribute es obligatorio.",
    "exists": "El :attribute seleccionado no es válido.",
    "image": "El :attribute debe ser una imagen.",
    "in": "El :attribute seleccionado no es válido.",
    "integer": "El :attribute debe ser un número entero.",
    "ip": "El :attribute debe ser una dirección IP válida.",
    "ip4": "El :attribute debe ser una dirección IPv4 válida.",
    "ip6": "El :attribute debe ser una dirección IPv6 válida.",
    "max": {
        "numeric": "El :attribute no puede ser mayor que :max.",
        "file": "El :attribute no puede ser mayor que :max kilobytes.",
        "string": "El :attribute no puede tener más de :max caracteres.",
        "array": "El :attribute no puede tener más de :max elementos.",
    },
    "mimes": "El :attribute debe ser un archivo de tipo: :values.",
    "min": {
        "numeric": "El :attribute debe ser al menos :min.",
        "file": "El :attribute debe tener al menos :min kilobytes.",
        "string": "El :attribute debe tener al menos :min caracteres.",
        "array": "El :attribute debe tener al menos :min elementos.",
    },
    "not_in": "El :attribute seleccionado no es válido.",
    "numeric": "El :attribute debe ser un número.",
    "regex": "El formato de :attribute no es válido.",
    "required": "El campo :attribute es obligatorio.",
    "required_if": "El campo :attribute es obligatorio cuando :other es :value.",
    "required_with": "El campo :attribute es obligatorio cuando :values está presente.",
    "required_with_all": "El campo :attribute es obligatorio cuando :values está presente.",
    "required_without": "El campo :attribute es obligatorio cuando :values no está presente.",
    "required_without_all": "El campo :attribute es obligatorio cuando ninguno de :values está presente.",
    "same": "El :attribute y :other deben coincidir.",
    "size": {
        "numeric": "El :attribute debe ser :size.",
        "file": "El :attribute debe tener :size kilobytes.",
        "string": "El :attribute debe tener :size caracteres.",
        "array": "El :attribute debe contener :size elementos.",
    },
    "unique": "El :attribute ya ha sido registrado.",
    "url": "El formato de :attribute no es válido.",
    "timezone": "El :attribute debe ser una zona válida.",
}
