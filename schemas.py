category = {
    "type": "object",
    "properties": {
        "id": {
            "type": "integer"
        },
        "name": {
            "type": "string"
        }
    }
}

tag = {
    "type": "object",
    "properties": {
        "id": {
            "type": "integer"
        },
        "name": {
            "type": "string"
        }
    }
}

pet = {
    "type": "object",
    "required": ["id", "name", "photoUrls"],
    "properties": {
        "id": {
            "type": "integer"
        },
        "name": {
            "type": "string"
        },
        "category": category,
        "photoUrls": {
            "type": "array",
            "items": {"type": "string"}
        },
        "tags": {
            "type": "array",
            "items": tag
        },
        "status": {
            "type": "string"
        }
    }
}

pet_list = {
    "type": "array",
    "items": pet
}


user = {
    "type": "object",
    "required": ["id", "username"],
    "properties": {
        "id": {
            "type": "integer"
        },
        "username": {
            "type": "string"
        },
        "firstName": {
            "type": "string"
        },
        "lastName": {
            "type": "string"
        },
        "email": {
            "type": "string"
        },
        "password": {
            "type": "string"
        },
        "phone": {
            "type": "string"
        },
        "userStatus": {
            "type": "integer"
        }
    }
}


order = {
    "type": "object",
    "required": ["id", "petId", "quantity", "status", "complete"],
    "properties": {
        "id": {
            "type": "integer"
        },
        "petId": {
            "type": "integer"
        },
        "quantity": {
            "type": "integer"
        },
        "shipDate": {
            "type": "string",
            "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{4}$"
        },
        "status": {
            "type": "string"
        },
        "complete": {
            "type": "boolean"
        }
    }
}


api_response = {
    "type": "object",
    "required": ["code", "message"],
    "properties": {
        "code": {
            "type": "integer"
        },
        "type": {
            "type": "string"
        },
        "message": {
            "type": "string"
        }
    }
}


# Counts keyed by pet status; statuses are free-form strings
inventory = {
    "type": "object",
    "additionalProperties": {
        "type": "integer",
        "minimum": 0
    }
}
