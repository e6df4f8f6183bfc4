"""GraphQL documents for the Fly API.

One document per remote operation. Secrets are only ever selected by
``id``, ``name``, ``digest`` and ``createdAt``; the API never returns values.
"""

from __future__ import annotations

SECRET_FIELDS: str = "id name digest createdAt"

APP_FRAGMENT: str = f"""\
fragment AppFragment on App {{
    id
    name
    appUrl
    organization {{ id slug }}
    secrets {{ {SECRET_FIELDS} }}
}}
"""

RESOLVE_ORG: str = """\
query Organization($slug: String!) {
    organization(slug: $slug) { id slug name }
}
"""

DEFAULT_ORG: str = """\
query DefaultOrganization {
    personalOrganization { id slug name }
}
"""

CREATE_APP: str = (
    """\
mutation CreateApp($name: String!, $organizationId: ID!) {
    createApp(input: {name: $name, organizationId: $organizationId}) {
        app { ...AppFragment }
    }
}
"""
    + APP_FRAGMENT
)

GET_APP: str = (
    """\
query GetApp($name: String!) {
    app(name: $name) { ...AppFragment }
}
"""
    + APP_FRAGMENT
)

GET_FULL_APP: str = """\
query GetFullApp($name: String!) {
    app(name: $name) {
        id
        name
        appUrl
        hostname
        status
        deployed
        currentRelease { id }
        healthChecks { nodes { name status } }
        ipAddresses { nodes { address } }
    }
}
"""

DELETE_APP: str = """\
mutation DeleteApp($appId: ID!) {
    deleteApp(appId: $appId) { organization { id } }
}
"""

SET_SECRETS: str = f"""\
mutation SetSecrets($input: SetSecretsInput!) {{
    setSecrets(input: $input) {{
        app {{ secrets {{ {SECRET_FIELDS} }} }}
    }}
}}
"""

UNSET_SECRETS: str = """\
mutation UnsetSecrets($appId: ID!, $keys: [String!]!) {
    unsetSecrets(input: {appId: $appId, keys: $keys}) {
        release { id }
    }
}
"""

GET_SECRETS: str = f"""\
query GetSecrets($name: String!) {{
    app(name: $name) {{ secrets {{ {SECRET_FIELDS} }} }}
}}
"""

CERTIFICATE_FIELDS: str = (
    "id hostname dnsValidationInstructions dnsValidationHostname dnsValidationTarget check"
)

ADD_CERTIFICATE: str = f"""\
mutation AddCertificate($appId: ID!, $hostname: String!) {{
    addCertificate(appId: $appId, hostname: $hostname) {{
        certificate {{ {CERTIFICATE_FIELDS} }}
    }}
}}
"""

GET_CERTIFICATE: str = f"""\
query GetCertificate($app: String!, $hostname: String!) {{
    app(name: $app) {{
        certificate(hostname: $hostname) {{ {CERTIFICATE_FIELDS} }}
    }}
}}
"""

DELETE_CERTIFICATE: str = """\
mutation DeleteCertificate($appId: ID!, $hostname: String!) {
    deleteCertificate(appId: $appId, hostname: $hostname) { app { name } }
}
"""

VOLUME_FIELDS: str = "id name sizeGb region internalId"

CREATE_VOLUME: str = f"""\
mutation CreateVolume($appId: ID!, $name: String!, $region: String!, $sizeGb: Int!) {{
    createVolume(input: {{appId: $appId, name: $name, region: $region, sizeGb: $sizeGb}}) {{
        volume {{ {VOLUME_FIELDS} }}
    }}
}}
"""

GET_VOLUME: str = f"""\
query GetVolume($app: String!, $internalId: String!) {{
    app(name: $app) {{
        volume(internalId: $internalId) {{ {VOLUME_FIELDS} }}
    }}
}}
"""

DELETE_VOLUME: str = """\
mutation DeleteVolume($volumeId: ID!) {
    deleteVolume(input: {volumeId: $volumeId}) { app { name } }
}
"""

IP_ADDRESS_FIELDS: str = "id address type region"

ALLOCATE_IP_ADDRESS: str = f"""\
mutation AllocateIpAddress($appId: ID!, $region: String!, $type: IPAddressType!) {{
    allocateIpAddress(input: {{appId: $appId, region: $region, type: $type}}) {{
        ipAddress {{ {IP_ADDRESS_FIELDS} }}
    }}
}}
"""

GET_IP_ADDRESS: str = f"""\
query GetIpAddress($app: String!, $address: String!) {{
    app(name: $app) {{
        ipAddress(address: $address) {{ {IP_ADDRESS_FIELDS} }}
    }}
}}
"""

RELEASE_IP_ADDRESS: str = """\
mutation ReleaseIpAddress($ipAddressId: ID!) {
    releaseIpAddress(input: {ipAddressId: $ipAddressId}) { app { name } }
}
"""
